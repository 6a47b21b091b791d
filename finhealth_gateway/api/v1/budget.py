"""POST /v1/budget/stats - budget progress for the current period"""

from fastapi import APIRouter

from finhealth_gateway.api.v1.schemas import BudgetStatsRequest, BudgetStatsResponse
from finhealth_gateway.domain.budget import compute_budget_stats
from finhealth_gateway.domain.models import BudgetDetail, LedgerEntry

router = APIRouter()


@router.post("/budget/stats", response_model=BudgetStatsResponse)
def budget_stats(request_body: BudgetStatsRequest):
    """Spent, remaining and status of the budget for the period containing `now`"""
    detail = None
    if request_body.budget is not None:
        detail = BudgetDetail(
            amount=request_body.budget.amount,
            filter_mode=request_body.budget.filter_mode,
            categories=frozenset(request_body.budget.categories),
        )

    entries = [
        LedgerEntry(id=e.id, amount=e.amount, category=e.category, date=e.date, kind=e.kind)
        for e in request_body.entries
    ]

    stats = compute_budget_stats(request_body.period, detail, entries, now=request_body.now)

    return BudgetStatsResponse(
        budget=stats.budget,
        spent=stats.spent,
        remaining=stats.remaining,
        percentage=stats.percentage,
        status=stats.status,
    )
