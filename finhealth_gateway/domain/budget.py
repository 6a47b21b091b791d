"""Budget-aware spend aggregation and budget progress statistics"""

from datetime import datetime
from typing import Iterable, Optional

from finhealth_gateway.domain.models import (
    BudgetDetail,
    BudgetStatsResult,
    CategoryFilters,
    DateRange,
    LedgerEntry,
    Period,
)
from finhealth_gateway.domain.periods import resolve_period
from finhealth_gateway.utils.date_utils import as_local_datetime

WARNING_THRESHOLD_PCT = 70
DANGER_THRESHOLD_PCT = 90


def is_expense(entry: LedgerEntry) -> bool:
    """Entries without a kind are bills, which are always expenses"""
    return entry.kind is None or entry.kind == "expense"


def passes_category_filter(category: str, include: Iterable[str], exclude: Iterable[str]) -> bool:
    include = set(include or ())
    exclude = set(exclude or ())
    if include:
        return category in include
    if exclude:
        return category not in exclude
    return True


def aggregate_spend(
    entries: Iterable[LedgerEntry],
    date_range: DateRange,
    include_categories: Iterable[str] = (),
    exclude_categories: Iterable[str] = (),
) -> float:
    """
    Sum expense amounts inside the range that pass the category filter.

    An include list takes precedence; the exclude list only applies when no
    include list is given.
    """
    include = set(include_categories or ())
    exclude = set(exclude_categories or ())

    return sum(
        entry.amount
        for entry in entries
        if date_range.contains(as_local_datetime(entry.date))
        and is_expense(entry)
        and passes_category_filter(entry.category, include, exclude)
    )


def budget_status(budget: Optional[float], percentage: float) -> str:
    if budget is None:
        return "none"
    if percentage >= DANGER_THRESHOLD_PCT:
        return "danger"
    if percentage >= WARNING_THRESHOLD_PCT:
        return "warning"
    return "good"


def compute_budget_stats(
    period: Period,
    budget_detail: Optional[BudgetDetail],
    entries: Iterable[LedgerEntry],
    filters: Optional[CategoryFilters] = None,
    now: Optional[datetime] = None,
) -> BudgetStatsResult:
    """
    Compute spent/remaining/percentage/status for the period containing `now`.

    When `filters` is omitted the budget detail's own filter mode applies.
    The result is a frozen value object, so identical inputs compare equal.
    """
    detail = budget_detail or BudgetDetail()
    budget = detail.amount
    filters = filters if filters is not None else detail.filters()

    spent = aggregate_spend(
        entries,
        resolve_period(period, now),
        filters.include,
        filters.exclude,
    )

    # A zero budget is treated like an unset amount for the ratios
    if budget:
        remaining = max(budget - spent, 0)
        percentage = min(spent / budget * 100, 100)
    else:
        remaining = 0
        percentage = 0

    return BudgetStatsResult(
        budget=budget,
        spent=spent,
        remaining=remaining,
        percentage=percentage,
        status=budget_status(budget, percentage),
    )
