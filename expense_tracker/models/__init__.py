"""
Data Models Package

This package contains all Pydantic models used by the expense tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.transaction import (
    KNOWN_CATEGORIES,
    Transaction,
    TransactionCategory,
    TransactionInput,
    TransactionType,
)
from expense_tracker.models.summary import (
    MONTH_NAMES,
    MonthKey,
    MonthlyStats,
    Totals,
)
from expense_tracker.models.events import (
    EventSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)
from expense_tracker.models.preferences import ThemePreference
from expense_tracker.models.validation import ValidationIssue

__all__ = [
    # Transaction models
    "KNOWN_CATEGORIES",
    "Transaction",
    "TransactionCategory",
    "TransactionInput",
    "TransactionType",
    # Derived views
    "MONTH_NAMES",
    "MonthKey",
    "MonthlyStats",
    "Totals",
    # Events
    "EventSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
    # Preferences
    "ThemePreference",
    # Validation
    "ValidationIssue",
]
