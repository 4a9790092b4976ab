"""Derived view queries: aggregation and filtering."""

from expense_tracker.queries.aggregation import (
    ALL,
    category_breakdown,
    in_month,
    month_of,
    monthly_stats,
    observed_months,
    recent,
    resolve_month,
    totals,
)
from expense_tracker.queries.filters import FilterState, ViewFilterState, apply_filter

__all__ = [
    "ALL",
    "FilterState",
    "ViewFilterState",
    "apply_filter",
    "category_breakdown",
    "in_month",
    "month_of",
    "monthly_stats",
    "observed_months",
    "recent",
    "resolve_month",
    "totals",
]
