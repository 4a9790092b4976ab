"""
Transaction Input Validation

Turns raw form input (strings, numbers, whatever the presentation layer
collected) into a typed TransactionInput, or reports exactly which fields
are wrong.

Checks:
- Title present and not blank
- Amount present, numeric, finite, greater than zero and in whole cents
- Type is income or expense
- Category present
- Date present and a real calendar date

IMPORTANT: Validation NEVER silently fixes issues.
Every problem is reported per field so it can be shown next to the input.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.models.transaction import (
    AMOUNT_DECIMAL_PLACES,
    MAX_AMOUNT_DIGITS,
    TransactionInput,
    TransactionType,
)
from expense_tracker.models.validation import ValidationIssue


CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal(10) ** (MAX_AMOUNT_DIGITS - AMOUNT_DECIMAL_PLACES)


class ValidationError(ValueError):
    """Input for a new transaction was rejected."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
        super().__init__(summary or "Invalid transaction")

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    def messages_by_field(self) -> dict[str, str]:
        """First message for each failing field."""
        messages: dict[str, str] = {}
        for issue in self.issues:
            messages.setdefault(issue.field, issue.message)
        return messages


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransactionValidator:
    """Validates raw input for a new transaction."""

    def validate(self, raw: Mapping[str, Any]) -> TransactionInput:
        """
        Validate raw input.

        Returns:
            The typed input, ready for the ledger

        Raises:
            ValidationError: Listing every failing field
        """
        issues: list[ValidationIssue] = []

        title = raw.get("title")
        if _is_blank(title) or not isinstance(title, str):
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
            ))

        amount, amount_issue = self._check_amount(raw.get("amount"))
        if amount_issue:
            issues.append(amount_issue)

        txn_type = raw.get("type")
        if _is_blank(txn_type):
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Please select a type",
            ))
        elif str(getattr(txn_type, "value", txn_type)) not in {t.value for t in TransactionType}:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Unknown transaction type: {txn_type}",
                suggested_fix="Choose income or expense",
            ))

        category = raw.get("category")
        if _is_blank(category):
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please select a category",
            ))

        day, date_issue = self._check_date(raw.get("date"))
        if date_issue:
            issues.append(date_issue)

        if issues:
            raise ValidationError(issues)

        try:
            return TransactionInput(
                title=title,
                amount=amount,
                type=getattr(txn_type, "value", txn_type),
                category=str(getattr(category, "value", category)),
                date=day,
            )
        except PydanticValidationError as e:
            raise ValidationError([
                ValidationIssue(
                    field=str(error["loc"][0]) if error["loc"] else "input",
                    issue_type="invalid_value",
                    message=error["msg"],
                )
                for error in e.errors()
            ]) from e

    def _check_amount(
        self,
        value: Any,
    ) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
        """Parse an amount, returning (amount, issue)."""
        if _is_blank(value):
            return None, ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter a valid amount",
            )

        if isinstance(value, bool):
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Please enter a valid amount",
            )

        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Please enter a valid amount",
                suggested_fix="Use digits only, e.g. 12.50",
            )

        if not amount.is_finite():
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a finite number",
            )

        if amount <= 0:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                suggested_fix="Record money going out as an expense instead of a negative amount",
            )

        if amount >= MAX_AMOUNT:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount is too large",
                suggested_fix=f"Keep amounts below {MAX_AMOUNT:,}",
            )

        if amount.normalize().as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount can have at most 2 decimal places",
                suggested_fix="Round to whole cents, e.g. 12.50",
            )

        # "12.500" is a valid amount; drop the trailing zero past the cents
        if amount.as_tuple().exponent < -AMOUNT_DECIMAL_PLACES:
            amount = amount.quantize(CENTS)

        return amount, None

    def _check_date(self, value: Any) -> tuple[Optional[date], Optional[ValidationIssue]]:
        """Parse a calendar date, returning (date, issue)."""
        if _is_blank(value):
            return None, ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            )

        if isinstance(value, datetime):
            return value.date(), None
        if isinstance(value, date):
            return value, None

        try:
            return date.fromisoformat(str(value).strip()), None
        except ValueError:
            return None, ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message="Date must look like YYYY-MM-DD",
            )
