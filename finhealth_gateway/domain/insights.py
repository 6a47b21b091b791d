"""Rule-based report insights derived from the summary and its score"""

import uuid
from typing import List

from finhealth_gateway.domain.models import HealthScoreDetail, Insight
from finhealth_gateway.domain.scoring import RECURRING_TARGET_DAYS
from finhealth_gateway.domain.summary import BillSummaryInput

MAX_INSIGHTS = 6


def _insight(title: str, description: str, severity: str, theme: str, action: str | None = None) -> Insight:
    return Insight(
        id=str(uuid.uuid4()),
        title=title,
        description=description,
        severity=severity,
        theme=theme,
        recommended_action=action,
    )


def generate_insights(summary: BillSummaryInput, detail: HealthScoreDetail) -> List[Insight]:
    """
    Produce up to six insights, most severe first.

    Severity guideline:
    - critical: usage >= 90% or expense growth > 40%
    - warn:     usage 70-90%, growth 15-40%, volatility > 50%, thin recurring cover
    - info:     positive observations and general tips
    """
    insights: List[Insight] = []
    usage = detail.sub_scores["budget"].pct or 0
    volatility = detail.sub_scores["volatility"].pct or 0
    cover_days = detail.sub_scores["recurring"].days or 0
    expense_qoq = summary.core_totals.expense_qo_q

    if summary.budget_utilisation.overall_budget:
        if usage >= 90:
            insights.append(_insight(
                "Budget nearly exhausted",
                f"You have used {usage}% of this {summary.period.value} budget.",
                "critical",
                "overspend",
                "Pause non-essential spending until the period resets",
            ))
        elif usage >= 70:
            insights.append(_insight(
                "Budget running high",
                f"{usage}% of the budget is already spent.",
                "warn",
                "overspend",
                "Review your largest categories",
            ))
        elif usage < 30:
            insights.append(_insight(
                "Budget well under control",
                f"Only {usage}% of the budget is used so far.",
                "info",
                "underutilised_budget",
            ))

    if expense_qoq is not None:
        if expense_qoq > 40:
            insights.append(_insight(
                "Spending jumped",
                f"Expenses are up {round(expense_qoq)}% on the previous period.",
                "critical",
                "momentum",
                "Find the categories driving the increase",
            ))
        elif expense_qoq > 15:
            insights.append(_insight(
                "Spending is climbing",
                f"Expenses are up {round(expense_qoq)}% on the previous period.",
                "warn",
                "momentum",
            ))

    if volatility > 50:
        insights.append(_insight(
            "Irregular daily spending",
            f"Daily spend varies by {volatility}% around its average.",
            "warn",
            "volatility",
            "Spread large purchases across the period",
        ))

    if cover_days < RECURRING_TARGET_DAYS:
        severity = "warn" if cover_days < 30 else "info"
        insights.append(_insight(
            "Recurring bills cover is thin",
            f"Your cash covers about {cover_days} days of recurring bills.",
            severity,
            "recurring_risk",
            "Schedule recurring bill alerts",
        ))

    savings = detail.sub_scores.get("savings")
    if savings is not None:
        if savings.pct is not None and savings.pct < 0:
            insights.append(_insight(
                "Spending exceeds income",
                "Expenses are higher than income this period.",
                "critical",
                "cashflow",
                "Cut back until income covers expenses",
            ))
        elif savings.pct is not None and savings.pct >= 20:
            insights.append(_insight(
                "Healthy savings rate",
                f"You are keeping {savings.pct}% of your income.",
                "info",
                "savings_opportunity",
                "Move the surplus into savings",
            ))

    if not insights:
        insights.append(_insight(
            "Finances look steady",
            f"Health score {detail.score} ({detail.status}).",
            "info",
            "cashflow",
        ))

    order = {"critical": 0, "warn": 1, "info": 2}
    insights.sort(key=lambda i: order[i.severity])
    return insights[:MAX_INSIGHTS]
