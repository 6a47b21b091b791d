"""Unit tests for local and authoritative health scoring"""

import pytest
from finhealth_gateway.domain.insights import generate_insights
from finhealth_gateway.domain.scoring import (
    compute_health_score,
    score_status,
    score_summary,
)
from finhealth_gateway.domain.summary import (
    BillSummaryInput,
    BudgetUtilisation,
    CategoryTotal,
    CoreTotals,
    Recurring,
    Volatility,
)
from finhealth_gateway.utils.math_utils import round_half_up
from conftest import make_summary


def test_local_score_reference_case():
    """usage 50, volatility 20, cover 70 -> 20 + 6 + 0 deducted, score 74"""
    detail = compute_health_score(make_summary(usage_pct=50, volatility_pct=20, cover_days=70))

    assert detail.score == 74
    assert detail.status == "Good"
    assert detail.sub_scores["budget"].deduction == 20
    assert detail.sub_scores["budget"].pct == 50
    assert detail.sub_scores["volatility"].deduction == 6
    assert detail.sub_scores["volatility"].pct == 20
    assert detail.sub_scores["recurring"].deduction == 0
    assert detail.sub_scores["recurring"].days == 70
    assert "savings" not in detail.sub_scores


@pytest.mark.parametrize(
    "score,status",
    [(100, "Good"), (70, "Good"), (69, "Warning"), (40, "Warning"), (39, "Danger"), (-12, "Danger")],
)
def test_score_status_boundaries(score, status):
    assert score_status(score) == status


def test_local_score_exactly_seventy_is_good():
    detail = compute_health_score(make_summary(usage_pct=75, volatility_pct=0, cover_days=70))
    assert detail.score == 70
    assert detail.status == "Good"


def test_local_score_rounds_half_up():
    """100 - 25.5 = 74.5 rounds to 75, unlike Python's round()"""
    detail = compute_health_score(make_summary(usage_pct=63.75, volatility_pct=0, cover_days=70))
    assert detail.score == 75
    assert detail.sub_scores["budget"].pct == 64
    assert detail.sub_scores["budget"].deduction == 26


def test_round_half_up():
    assert round_half_up(74.5) == 75
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(-0.5) == 0
    assert round_half_up(-1.5) == -1


def test_local_score_defaults_missing_fields_to_zero():
    """An empty summary still scores: only the recurring shortfall (70 days x 0.1) is deducted"""
    detail = compute_health_score(BillSummaryInput())
    assert detail.score == 93
    assert detail.status == "Good"
    assert detail.sub_scores["recurring"].days == 0
    assert detail.sub_scores["recurring"].deduction == 7


def test_local_score_is_not_clamped():
    """Out-of-range inputs surface as out-of-range scores rather than errors"""
    detail = compute_health_score(make_summary(usage_pct=400, volatility_pct=100, cover_days=0))
    assert detail.score < 0
    assert detail.status == "Danger"


def test_local_score_from_wire_payload():
    """camelCase payloads with missing sections parse and score"""
    summary = BillSummaryInput.model_validate(
        {
            "period": "weekly",
            "startDate": "2026-03-09",
            "endDate": "2026-03-15",
            "coreTotals": {"totalExpense": 42},
            "budgetUtilisation": {"usagePct": 50},
        }
    )
    detail = compute_health_score(summary)
    # 100 - (20 + 0 + 7)
    assert detail.score == 73


def test_server_score_includes_savings():
    summary = BillSummaryInput(
        start_date="2026-03-01",
        end_date="2026-03-31",
        core_totals=CoreTotals(total_expense=500, total_income=2000),
        budget_utilisation=BudgetUtilisation(overall_budget=1000),
        volatility=Volatility(daily_expenses=[10, 10, 10]),
        recurring=Recurring(recurring_cover_days=70),
    )
    detail = score_summary(summary)

    # budget 50% -> 20, volatility 0, savings 75% -> 5, recurring 0
    assert detail.score == 75
    assert detail.sub_scores["savings"].pct == 75
    assert detail.sub_scores["savings"].deduction == 5
    assert detail.sub_scores["volatility"].pct == 0
    assert list(detail.sub_scores) == ["budget", "volatility", "savings", "recurring"]


def test_server_score_falls_back_to_category_budgets():
    summary = BillSummaryInput(
        start_date="2026-03-01",
        end_date="2026-03-31",
        core_totals=CoreTotals(total_expense=250),
        category_totals=[
            CategoryTotal(category="food", amount=150, budget=400),
            CategoryTotal(category="fun", amount=100, budget=100),
            CategoryTotal(category="misc", amount=0),
        ],
        recurring=Recurring(recurring_cover_days=70),
    )
    detail = score_summary(summary)
    assert detail.sub_scores["budget"].pct == 50
    assert "savings" not in detail.sub_scores


def test_server_and_local_scores_agree_without_income():
    """With matching usage/volatility and no income both formulas land on the same score"""
    summary = BillSummaryInput(
        start_date="2026-03-01",
        end_date="2026-03-31",
        core_totals=CoreTotals(total_expense=600),
        budget_utilisation=BudgetUtilisation(overall_budget=1000, usage_pct=60),
        volatility=Volatility(daily_expenses=[20, 20], volatility_pct=0),
        recurring=Recurring(recurring_cover_days=40),
    )
    assert abs(score_summary(summary).score - compute_health_score(summary).score) <= 1


def test_insights_flag_overspend_first():
    summary = make_summary(total_expense=950)
    summary.core_totals.expense_qo_q = 20
    detail = score_summary(summary)

    insights = generate_insights(summary, detail)

    assert insights[0].severity == "critical"
    assert insights[0].theme == "overspend"
    assert any(i.theme == "momentum" and i.severity == "warn" for i in insights)
    assert len(insights) <= 6


def test_insights_never_empty():
    summary = make_summary(total_expense=500)
    insights = generate_insights(summary, score_summary(summary))
    assert len(insights) >= 1
    assert all(i.id for i in insights)
