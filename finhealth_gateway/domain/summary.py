"""Bill summary - the aggregated input shared by the local and remote scorers"""

import math
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finhealth_gateway.domain.budget import is_expense, passes_category_filter
from finhealth_gateway.domain.models import Budgets, LedgerEntry, Period
from finhealth_gateway.utils.date_utils import as_local_datetime, generate_date_range

MAX_CATEGORY_TOTALS = 15
TOP_SPEND_DAYS = 3
RECURRING_MIN_OCCURRENCES = 3


class SummaryModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CoreTotals(SummaryModel):
    total_expense: float = 0
    total_income: Optional[float] = None
    prev_expense: Optional[float] = None
    prev_income: Optional[float] = None
    expense_qo_q: Optional[float] = Field(default=None, alias="expenseQoQ")
    income_qo_q: Optional[float] = Field(default=None, alias="incomeQoQ")


class CategoryTotal(SummaryModel):
    category: str
    amount: float = 0
    budget: Optional[float] = None


class CategoryUtil(CategoryTotal):
    usage_pct: Optional[float] = None


class BudgetUtilisation(SummaryModel):
    overall_budget: Optional[float] = None
    usage_pct: float = 0
    category_util: List[CategoryUtil] = Field(default_factory=list)


class DailyStats(SummaryModel):
    mean: float = 0
    median: float = 0
    max: float = 0
    min: float = 0
    p90: float = 0


class SpendDay(SummaryModel):
    date: str
    amount: float


class Volatility(SummaryModel):
    daily_expenses: List[float] = Field(default_factory=list)
    volatility_pct: float = 0
    daily_stats: DailyStats = Field(default_factory=DailyStats)
    top_spend_days: List[SpendDay] = Field(default_factory=list)


class CategoryMomentum(SummaryModel):
    category: str
    curr_amount: float = 0
    prev_amount: float = 0
    change_pct: float = 0


class Recurring(SummaryModel):
    recurring_cover_days: float = 0


class BillSummaryInput(SummaryModel):
    """
    Aggregated period summary.

    Every numeric field the scorers read has an explicit default, so a partial
    payload always scores. An empty start or end date marks the summary as not
    ready (upstream data still loading).
    """

    period: Period = Period.MONTHLY
    start_date: str = ""
    end_date: str = ""
    core_totals: CoreTotals = Field(default_factory=CoreTotals)
    budget_utilisation: BudgetUtilisation = Field(default_factory=BudgetUtilisation)
    volatility: Volatility = Field(default_factory=Volatility)
    category_momentum: List[CategoryMomentum] = Field(default_factory=list)
    recurring: Recurring = Field(default_factory=Recurring)
    category_totals: List[CategoryTotal] = Field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        return bool(self.start_date and self.end_date)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def volatility_pct(daily_expenses: List[float]) -> float:
    """Coefficient of variation (population stddev / mean) as a percentage"""
    if not daily_expenses:
        return 0.0
    mean = sum(daily_expenses) / len(daily_expenses)
    if mean == 0:
        return 0.0
    variance = sum((v - mean) ** 2 for v in daily_expenses) / len(daily_expenses)
    return math.sqrt(variance) / mean * 100


def daily_stats(daily_expenses: List[float]) -> DailyStats:
    if not daily_expenses:
        return DailyStats()
    ordered = sorted(daily_expenses)
    return DailyStats(
        mean=sum(ordered) / len(ordered),
        median=ordered[len(ordered) // 2],
        max=ordered[-1],
        min=ordered[0],
        p90=ordered[min(int(len(ordered) * 0.9), len(ordered) - 1)],
    )


def recurring_cover_days(entries: List[LedgerEntry], cash_balance: float) -> int:
    """
    Days the cash balance covers detected recurring bills.

    A bill is recurring when at least three entries share category and amount;
    the monthly sum of one amount per group is spread over 30 days.
    """
    groups: Dict[tuple, List[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        groups[(entry.category, entry.amount)].append(entry)

    monthly_recurring = sum(
        group[0].amount for group in groups.values() if len(group) >= RECURRING_MIN_OCCURRENCES
    )
    daily_recurring = monthly_recurring / 30
    if daily_recurring == 0:
        return 0
    return math.floor(cash_balance / daily_recurring)


def summarise_entries(
    entries: Iterable[LedgerEntry],
    budgets: Budgets,
    period: Period,
    start: date,
    end: date,
    cash_balance: float = 0,
    total_income: Optional[float] = None,
) -> BillSummaryInput:
    """Build the scorer input for the period from raw ledger entries"""
    detail = budgets.for_period(period)
    filters = detail.filters()
    start_at = as_local_datetime(start)
    end_at = as_local_datetime(end)
    if not isinstance(end, datetime):
        end_at = end_at.replace(hour=23, minute=59, second=59, microsecond=999999)

    filtered = [
        entry
        for entry in entries
        if start_at <= as_local_datetime(entry.date) <= end_at
        and is_expense(entry)
        and passes_category_filter(entry.category, filters.include, filters.exclude)
    ]

    total_expense = sum(entry.amount for entry in filtered)

    by_category: Dict[str, float] = defaultdict(float)
    by_day: Dict[date, float] = defaultdict(float)
    for entry in filtered:
        by_category[entry.category] += entry.amount
        by_day[as_local_datetime(entry.date).date()] += entry.amount

    category_totals = [
        CategoryTotal(
            category=category,
            amount=amount,
            budget=detail.amount if category in detail.categories else None,
        )
        for category, amount in sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    ][:MAX_CATEGORY_TOTALS]

    daily_expenses = [by_day.get(day, 0.0) for day in generate_date_range(start_at.date(), end_at.date())]

    top_days = sorted(by_day.items(), key=lambda item: item[1], reverse=True)[:TOP_SPEND_DAYS]

    usage_pct = total_expense / detail.amount * 100 if detail.amount else 0

    return BillSummaryInput(
        period=period,
        start_date=start_at.date().isoformat(),
        end_date=end_at.date().isoformat(),
        core_totals=CoreTotals(total_expense=total_expense, total_income=total_income),
        budget_utilisation=BudgetUtilisation(
            overall_budget=detail.amount,
            usage_pct=usage_pct,
            category_util=[
                CategoryUtil(
                    **c.model_dump(),
                    usage_pct=c.amount / c.budget * 100 if c.budget else None,
                )
                for c in category_totals
            ],
        ),
        volatility=Volatility(
            daily_expenses=daily_expenses,
            volatility_pct=volatility_pct(daily_expenses),
            daily_stats=daily_stats(daily_expenses),
            top_spend_days=[SpendDay(date=day.isoformat(), amount=amount) for day, amount in top_days],
        ),
        recurring=Recurring(recurring_cover_days=recurring_cover_days(filtered, cash_balance)),
        category_totals=category_totals,
    )
