"""Tests for aggregation and view filters."""

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.models import MonthKey, TransactionType
from expense_tracker.queries import (
    ALL,
    FilterState,
    ViewFilterState,
    apply_filter,
    category_breakdown,
    monthly_stats,
    observed_months,
    recent,
    resolve_month,
    totals,
)

from conftest import make_transaction


INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


@pytest.fixture
def sample():
    """Mixed ledger, most recent insertion first."""
    return [
        make_transaction("Dinner", "30.10", EXPENSE, "food", date(2024, 3, 20)),
        make_transaction("Salary", "2000", INCOME, "salary", date(2024, 3, 1)),
        make_transaction("Flight", "450.45", EXPENSE, "travel", date(2024, 2, 11)),
        make_transaction("Snacks", "4.90", EXPENSE, "food", date(2023, 12, 24)),
        make_transaction("Refund", "20", INCOME, "shopping", date(2024, 2, 2)),
    ]


class TestTotals:
    """Tests for totals()."""

    def test_empty(self):
        result = totals([])
        assert (result.income, result.expenses, result.balance) == (0, 0, 0)

    def test_simple(self):
        result = totals([
            make_transaction(amount="100", txn_type=INCOME),
            make_transaction(amount="40", txn_type=EXPENSE),
        ])
        assert result.income == 100
        assert result.expenses == 40
        assert result.balance == 60

    def test_decimal_sums_do_not_drift(self):
        """Test ten 0.1 expenses add up to exactly 1."""
        result = totals([make_transaction(amount=0.1) for _ in range(10)])
        assert result.expenses == Decimal("1.0")

    def test_negative_balance(self, sample):
        result = totals([t for t in sample if t.type == EXPENSE])
        assert result.balance == Decimal("-485.45")


class TestMonthlyStats:
    """Tests for monthly_stats()."""

    def test_all_equals_totals(self, sample):
        stats = monthly_stats(sample, ALL)
        overall = totals(sample)
        assert stats.count == len(sample)
        assert stats.income == overall.income
        assert stats.expenses == overall.expenses
        assert stats.net == overall.balance

    def test_none_means_all(self, sample):
        assert monthly_stats(sample, None) == monthly_stats(sample, ALL)

    def test_single_month_by_key(self, sample):
        stats = monthly_stats(sample, MonthKey(year=2024, month=3))
        assert stats.count == 2
        assert stats.income == Decimal("2000")
        assert stats.expenses == Decimal("30.10")
        assert stats.net == Decimal("1969.90")

    def test_single_month_by_label(self, sample):
        assert monthly_stats(sample, "February 2024") == monthly_stats(
            sample, MonthKey(year=2024, month=2)
        )
        assert monthly_stats(sample, "2024-02").count == 2

    def test_month_without_transactions(self, sample):
        stats = monthly_stats(sample, MonthKey(year=1999, month=1))
        assert stats.count == 0
        assert stats.net == 0

    def test_unknown_label_raises(self, sample):
        with pytest.raises(ValueError):
            monthly_stats(sample, "Someday")

    def test_month_boundaries(self):
        txns = [
            make_transaction(day=date(2024, 1, 31)),
            make_transaction(day=date(2024, 2, 1)),
        ]
        assert monthly_stats(txns, "January 2024").count == 1


class TestObservedMonths:
    """Tests for observed_months()."""

    def test_distinct_and_descending(self, sample):
        assert observed_months(sample) == [
            MonthKey(year=2024, month=3),
            MonthKey(year=2024, month=2),
            MonthKey(year=2023, month=12),
        ]

    def test_empty(self):
        assert observed_months([]) == []

    def test_resolve_month(self):
        assert resolve_month("all") is None
        assert resolve_month(" ALL ") is None
        assert resolve_month("March 2024") == MonthKey(year=2024, month=3)


class TestRecentAndBreakdown:
    """Tests for recent() and category_breakdown()."""

    def test_recent_keeps_ledger_order(self, sample):
        assert [t.title for t in recent(sample, 2)] == ["Dinner", "Salary"]
        assert len(recent(sample, 50)) == len(sample)
        assert recent(sample, 0) == []

    def test_breakdown_expenses(self, sample):
        breakdown = category_breakdown(sample, EXPENSE)
        assert breakdown == {"travel": Decimal("450.45"), "food": Decimal("35.00")}
        assert list(breakdown) == ["travel", "food"]

    def test_breakdown_all_types(self, sample):
        assert category_breakdown(sample)["salary"] == Decimal("2000")


class TestFilters:
    """Tests for FilterState and apply_filter()."""

    def test_default_is_identity(self, sample):
        assert FilterState().is_default
        assert apply_filter(sample, FilterState()) == sample

    def test_expense_only_preserves_order(self, sample):
        result = apply_filter(sample, FilterState(type="expense", category="all"))
        assert [t.title for t in result] == ["Dinner", "Flight", "Snacks"]

    def test_type_and_category(self, sample):
        result = apply_filter(sample, FilterState(type="expense", category="food"))
        assert [t.title for t in result] == ["Dinner", "Snacks"]

    def test_category_only(self, sample):
        result = apply_filter(sample, FilterState(category="shopping"))
        assert [t.title for t in result] == ["Refund"]

    def test_month_does_not_filter_list(self, sample):
        """Test the month selector is ignored by the transaction list."""
        state = FilterState(month="March 2024")
        assert apply_filter(sample, state) == sample

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            FilterState(type="transfer")
        with pytest.raises(ValueError):
            FilterState(month="not a month")
        with pytest.raises(ValueError):
            FilterState(category="  ")

    def test_update_is_partial(self):
        state = FilterState(type="income").update(category="salary")
        assert state.type == INCOME
        assert state.category == "salary"
        assert state.month == ALL

    def test_update_rejects_unknown_selector(self):
        with pytest.raises(ValueError):
            FilterState().update(colour="red")


class TestViewFilterState:
    """Tests for the session filter holder."""

    def test_set_filter_and_apply(self, sample):
        view = ViewFilterState()
        view.set_filter(type="income")
        assert [t.title for t in view.apply(sample)] == ["Salary", "Refund"]

    def test_monthly_stats_ignore_type_and_category(self, sample):
        view = ViewFilterState()
        view.set_filter(type="income", category="salary", month="2024-03")
        stats = view.monthly_stats(sample)
        assert stats.count == 2
        assert stats.expenses == Decimal("30.10")

    def test_reset(self):
        view = ViewFilterState()
        view.set_filter(type="expense", month="2024-01")
        assert view.reset().is_default
