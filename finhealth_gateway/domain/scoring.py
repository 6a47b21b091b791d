"""Health scoring engine - local fallback and authoritative formulas"""

from typing import Optional

from finhealth_gateway.domain.models import HealthScoreDetail, SubScore
from finhealth_gateway.domain.summary import BillSummaryInput, volatility_pct
from finhealth_gateway.utils.math_utils import round_half_up

BUDGET_WEIGHT = 0.4
VOLATILITY_WEIGHT = 0.3
SAVINGS_WEIGHT = 0.2
RECURRING_WEIGHT = 0.1
RECURRING_TARGET_DAYS = 70

GOOD_THRESHOLD = 70
WARNING_THRESHOLD = 40


def score_status(score: int) -> str:
    """
    Map a score to its band.

    Score bands:
    - 70+:     Good
    - 40 - 69: Warning
    - < 40:    Danger
    """
    if score >= GOOD_THRESHOLD:
        return "Good"
    elif score >= WARNING_THRESHOLD:
        return "Warning"
    else:
        return "Danger"


def recurring_deduction(recurring_cover_days: float) -> float:
    return max(0, RECURRING_TARGET_DAYS - recurring_cover_days) * RECURRING_WEIGHT


def compute_health_score(summary: BillSummaryInput) -> HealthScoreDetail:
    """
    Compute the health score on-device from a pre-aggregated summary.

    Weights mirror the remote scorer (savings is not available locally):
    - budget usage pct x 0.4
    - daily spend volatility pct x 0.3
    - shortfall of recurring cover days below 70, x 0.1

    The total is rounded once from the unrounded deductions; sub-scores round
    their own pct/days and deduction independently, so the breakdown may not
    sum exactly to 100 - score. The score is not clamped: values outside
    0-100 indicate bad upstream data and are left for callers to judge.
    """
    budget_usage_pct = summary.budget_utilisation.usage_pct or 0
    vol_pct = summary.volatility.volatility_pct or 0
    cover_days = summary.recurring.recurring_cover_days or 0

    budget_ded = budget_usage_pct * BUDGET_WEIGHT
    vol_ded = vol_pct * VOLATILITY_WEIGHT
    rec_ded = recurring_deduction(cover_days)

    score = round_half_up(100 - (budget_ded + vol_ded + rec_ded))

    return HealthScoreDetail(
        score=score,
        status=score_status(score),
        sub_scores={
            "budget": SubScore(pct=round_half_up(budget_usage_pct), deduction=round_half_up(budget_ded)),
            "volatility": SubScore(pct=round_half_up(vol_pct), deduction=round_half_up(vol_ded)),
            "recurring": SubScore(days=round_half_up(cover_days), deduction=round_half_up(rec_ded)),
        },
    )


def summary_budget_usage_pct(summary: BillSummaryInput) -> float:
    """
    Usage against the overall budget, falling back to the sum of
    per-category budgets when no positive overall budget is given.
    """
    overall = summary.budget_utilisation.overall_budget
    per_category = sum(c.budget or 0 for c in summary.category_totals if c.budget is not None)
    total_budgeted = overall if overall is not None and overall > 0 else per_category
    expense = summary.core_totals.total_expense or 0
    return expense / total_budgeted * 100 if total_budgeted > 0 else 0.0


def savings_rate_pct(summary: BillSummaryInput) -> Optional[float]:
    income = summary.core_totals.total_income
    if not income:
        return None
    expense = summary.core_totals.total_expense or 0
    return (income - expense) / income * 100


def score_summary(summary: BillSummaryInput) -> HealthScoreDetail:
    """
    Authoritative score served by the insights endpoint.

    Recomputes usage and volatility from the raw figures rather than trusting
    client-side percentages, and adds a savings deduction when income is known.
    """
    budget_usage_pct = summary_budget_usage_pct(summary)
    vol_pct = volatility_pct(summary.volatility.daily_expenses)
    savings_pct = savings_rate_pct(summary)
    cover_days = summary.recurring.recurring_cover_days or 0

    budget_ded = budget_usage_pct * BUDGET_WEIGHT
    vol_ded = vol_pct * VOLATILITY_WEIGHT
    sav_ded = (100 - savings_pct) * SAVINGS_WEIGHT if savings_pct is not None else 0
    rec_ded = recurring_deduction(cover_days)

    score = round_half_up(100 - (budget_ded + vol_ded + sav_ded + rec_ded))

    sub_scores = {
        "budget": SubScore(pct=round_half_up(budget_usage_pct), deduction=round_half_up(budget_ded)),
        "volatility": SubScore(pct=round_half_up(vol_pct), deduction=round_half_up(vol_ded)),
    }
    if savings_pct is not None:
        sub_scores["savings"] = SubScore(pct=round_half_up(savings_pct), deduction=round_half_up(sav_ded))
    sub_scores["recurring"] = SubScore(days=round_half_up(cover_days), deduction=round_half_up(rec_ded))

    return HealthScoreDetail(score=score, status=score_status(score), sub_scores=sub_scores)
