"""Validation package."""

from expense_tracker.validation.validator import TransactionValidator, ValidationError

__all__ = ["TransactionValidator", "ValidationError"]
