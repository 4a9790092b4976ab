"""
Core Data Models for Expense Tracker

These models define the strict schemas for the one entity the tracker
persists: a transaction. They are designed to:
1. Enforce type safety at runtime
2. Keep amounts exact (Decimal, never float arithmetic)
3. Round-trip through the stored JSON layout without loss

DESIGN DECISION: Amounts are always positive. Direction lives in `type`,
so a sign can never disagree with the income/expense flag.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCategory(str, Enum):
    """
    Built-in transaction categories.

    DESIGN DECISION: The set is open. Records carrying a category outside
    this list are kept and displayed with a default icon, never rejected.
    """
    FOOD = "food"
    TRAVEL = "travel"
    RENT = "rent"
    SHOPPING = "shopping"
    SALARY = "salary"
    OTHER = "other"


KNOWN_CATEGORIES = frozenset(category.value for category in TransactionCategory)

# Amounts are stored as JSON numbers (binary floats), which hold 15
# significant digits exactly: at most 13 before the point and 2 after.
MAX_AMOUNT_DIGITS = 15
AMOUNT_DECIMAL_PLACES = 2


def new_transaction_id() -> str:
    """Opaque identifier, unique even for two inserts in the same instant."""
    return uuid4().hex


def utc_now() -> datetime:
    """Current UTC time at millisecond precision, the precision stored."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _to_decimal(value: Any) -> Any:
    # Floats go through their repr so 0.1 stays Decimal("0.1")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionInput(BaseModel):
    """
    Validated user input for a new transaction.

    This is everything the user chooses. Identity and creation time are
    assigned by the ledger.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display title"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=MAX_AMOUNT_DIGITS,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        allow_inf_nan=False,
        description="Positive amount; direction is carried by type"
    )
    type: TransactionType
    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Category name (built-in or custom)"
    )
    date: date

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_float_amount(cls, v: Any) -> Any:
        return _to_decimal(v)

    @field_validator('category')
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.lower()


class Transaction(BaseModel):
    """
    A recorded income or expense.

    Instances are immutable: there is no edit operation, only add and
    delete. `created_at` is stored under the `timestamp` key.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Display title"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Positive amount; direction is carried by type"
    )
    type: TransactionType
    category: str = Field(
        ...,
        min_length=1,
        description="Category name (built-in or custom)"
    )
    date: date
    created_at: datetime = Field(
        default_factory=utc_now,
        alias="timestamp",
        description="When the transaction was recorded (UTC)"
    )

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Older records used numeric millisecond ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_float_amount(cls, v: Any) -> Any:
        return _to_decimal(v)

    @field_validator('category')
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.lower()

    @field_validator('created_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are treated as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_input(cls, data: TransactionInput) -> "Transaction":
        """Create a fresh transaction with a new id and creation time."""
        return cls(
            title=data.title,
            amount=data.amount,
            type=data.type,
            category=data.category,
            date=data.date,
        )

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Transaction":
        """Build a transaction from its stored JSON record."""
        return cls.model_validate(record)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_known_category(self) -> bool:
        return self.category in KNOWN_CATEGORIES

    def to_record(self) -> dict[str, Any]:
        """
        Convert to the stored JSON record.

        Layout:
        {id, title, amount (number), type, category, date (YYYY-MM-DD),
         timestamp (ISO datetime, UTC, millisecond precision)}
        """
        timestamp = self.created_at.astimezone(timezone.utc).isoformat(
            timespec="milliseconds"
        )
        return {
            "id": self.id,
            "title": self.title,
            "amount": float(self.amount),
            "type": self.type.value,
            "category": self.category,
            "date": self.date.isoformat(),
            "timestamp": timestamp.replace("+00:00", "Z"),
        }
