"""Unit tests for building the scorer summary from ledger entries"""

import pytest
from datetime import date, datetime
from finhealth_gateway.domain.models import BudgetDetail, Budgets, FilterMode, LedgerEntry, Period
from finhealth_gateway.domain.summary import (
    BillSummaryInput,
    daily_stats,
    recurring_cover_days,
    summarise_entries,
    volatility_pct,
)


def test_summary_totals_and_daily_series(sample_entries):
    budgets = Budgets({Period.MONTHLY: BudgetDetail(amount=1000)})
    summary = summarise_entries(sample_entries, budgets, Period.MONTHLY, date(2026, 3, 1), date(2026, 3, 31))

    assert summary.is_ready
    assert summary.start_date == "2026-03-01"
    assert summary.end_date == "2026-03-31"
    assert summary.core_totals.total_expense == 545.5
    assert summary.budget_utilisation.overall_budget == 1000
    assert summary.budget_utilisation.usage_pct == pytest.approx(54.55)
    assert len(summary.volatility.daily_expenses) == 31
    assert summary.volatility.daily_expenses[0] == 300  # rent on the 1st
    assert [d.date for d in summary.volatility.top_spend_days] == ["2026-03-01", "2026-03-02", "2026-03-09"]
    assert [c.category for c in summary.category_totals] == ["rent", "food", "transport"]


def test_summary_applies_include_budget_filter(sample_entries):
    budgets = Budgets({
        Period.MONTHLY: BudgetDetail(amount=200, filter_mode=FilterMode.INCLUDE, categories=frozenset({"food"})),
    })
    summary = summarise_entries(sample_entries, budgets, Period.MONTHLY, date(2026, 3, 1), date(2026, 3, 31))

    assert summary.core_totals.total_expense == 165.5
    assert summary.category_totals[0].category == "food"
    assert summary.category_totals[0].budget == 200
    assert summary.budget_utilisation.category_util[0].usage_pct == pytest.approx(82.75)


def test_summary_without_budget_has_zero_usage(sample_entries):
    summary = summarise_entries(sample_entries, Budgets(), Period.MONTHLY, date(2026, 3, 1), date(2026, 3, 31))
    assert summary.budget_utilisation.overall_budget is None
    assert summary.budget_utilisation.usage_pct == 0
    assert summary.category_totals[0].budget is None


def test_summary_wire_payload_is_camel_case(sample_entries):
    summary = summarise_entries(
        sample_entries, Budgets(), Period.WEEKLY, date(2026, 3, 9), date(2026, 3, 15), total_income=1200
    )
    payload = summary.to_payload()

    assert payload["period"] == "weekly"
    assert payload["coreTotals"]["totalExpense"] == 125.5
    assert payload["coreTotals"]["totalIncome"] == 1200
    assert "recurringCoverDays" in payload["recurring"]
    assert "dailyStats" in payload["volatility"]
    assert BillSummaryInput.model_validate(payload) == summary


def test_summary_not_ready_without_dates():
    assert not BillSummaryInput().is_ready
    assert not BillSummaryInput(start_date="2026-03-01").is_ready


def test_volatility_pct():
    assert volatility_pct([]) == 0
    assert volatility_pct([0, 0, 0]) == 0
    assert volatility_pct([10, 10, 10]) == 0
    # mean 10, population stddev 10
    assert volatility_pct([0, 20]) == pytest.approx(100)


def test_daily_stats():
    stats = daily_stats([5, 1, 3, 9, 7, 2, 8, 4, 6, 10])
    assert stats.mean == 5.5
    assert stats.min == 1
    assert stats.max == 10
    assert stats.median == 6
    assert stats.p90 == 10


def test_recurring_cover_days():
    """Three same-category, same-amount bills make a recurring charge"""
    rent = [
        LedgerEntry(id=f"r{i}", amount=30, category="subscription", date=datetime(2026, 1 + i, 1))
        for i in range(3)
    ]
    one_off = [LedgerEntry(id="o", amount=500, category="travel", date=datetime(2026, 2, 3))]

    # 30 / 30 days = 1 per day
    assert recurring_cover_days(rent + one_off, cash_balance=45) == 45
    assert recurring_cover_days(one_off, cash_balance=45) == 0
