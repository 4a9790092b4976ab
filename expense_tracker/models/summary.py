"""
Derived View Models

Value objects produced by the aggregation engine. None of these are
persisted; they are recomputed from the ledger whenever it changes.

DESIGN DECISION: Months are grouped by a (year, month) pair rather than by
a formatted label like "March 2024". Labels depend on language settings;
the pair does not. Labels are produced (and parsed) only at the display
boundary.
"""

import re
from datetime import date
from decimal import Decimal
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field


MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_ISO_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_LABEL_MONTH = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")


@total_ordering
class MonthKey(BaseModel):
    """A calendar month, independent of locale."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def of(cls, day: date) -> "MonthKey":
        return cls(year=day.year, month=day.month)

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        """
        Parse "2024-03" or a display label such as "March 2024".

        Raises:
            ValueError: If the value is neither form
        """
        text = value.strip()
        match = _ISO_MONTH.match(text)
        if match:
            return cls(year=int(match.group(1)), month=int(match.group(2)))

        match = _LABEL_MONTH.match(text)
        if match:
            name = match.group(1).capitalize()
            if name in MONTH_NAMES:
                return cls(year=int(match.group(2)), month=MONTH_NAMES.index(name) + 1)

        raise ValueError(f"Not a month: {value!r}")

    def as_tuple(self) -> tuple[int, int]:
        return (self.year, self.month)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    @property
    def label(self) -> str:
        """Display label, e.g. "March 2024"."""
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, MonthKey):
            return NotImplemented
        return self.as_tuple() < other.as_tuple()

    def __str__(self) -> str:
        return self.label


class Totals(BaseModel):
    """Overall income, expenses and balance."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class MonthlyStats(BaseModel):
    """Summary for one month (or for all time)."""
    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0)
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    net: Decimal = Decimal("0")
