"""
View Filters

Three independent selectors narrow what the user sees:
- type: all | income | expense
- category: all | any category name
- month: all | a calendar month

IMPORTANT: The selectors do not all apply to the same view.
Type and category filter the transaction list (and the summary totals).
Month applies ONLY to the monthly summary, which is computed over the
full ledger regardless of type and category.
"""

from collections.abc import Iterable
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, field_validator

from expense_tracker.models.summary import MonthKey, MonthlyStats
from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.queries.aggregation import ALL, monthly_stats


class FilterState(BaseModel):
    """Current filter selection. "all" is the identity for every selector."""
    model_config = ConfigDict(frozen=True)

    type: Union[Literal["all"], TransactionType] = ALL
    category: str = ALL
    month: Union[Literal["all"], MonthKey] = ALL

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('category', mode='before')
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            if not v:
                raise ValueError("Category selector cannot be blank")
        return v

    @field_validator('month', mode='before')
    @classmethod
    def parse_month(cls, v: Any) -> Any:
        if isinstance(v, str):
            text = v.strip()
            if text.lower() == ALL:
                return ALL
            return MonthKey.parse(text)
        return v

    @property
    def is_default(self) -> bool:
        return self.type == ALL and self.category == ALL and self.month == ALL

    def update(self, **partial: Any) -> "FilterState":
        """
        Return a copy with some selectors changed.

        Raises:
            ValueError: For unknown selector names or invalid values
        """
        unknown = set(partial) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown filter selector(s): {', '.join(sorted(unknown))}")
        return type(self)(**{**dict(self), **partial})

    def matches(self, transaction: Transaction) -> bool:
        """Type and category test. Month is deliberately not considered."""
        type_match = self.type == ALL or transaction.type == self.type
        category_match = self.category == ALL or transaction.category == self.category
        return type_match and category_match


def apply_filter(transactions: Iterable[Transaction], state: FilterState) -> list[Transaction]:
    """Keep transactions matching type and category, preserving order."""
    return [t for t in transactions if state.matches(t)]


class ViewFilterState:
    """
    Holds the current filter selection for one session.

    Not persisted: every new session starts with all selectors at "all".
    """

    def __init__(self, state: FilterState = FilterState()):
        self._state = state

    @property
    def state(self) -> FilterState:
        return self._state

    def set_filter(self, **partial: Any) -> FilterState:
        """Change one or more selectors; the others keep their values."""
        self._state = self._state.update(**partial)
        return self._state

    def reset(self) -> FilterState:
        self._state = FilterState()
        return self._state

    def apply(self, transactions: Iterable[Transaction]) -> list[Transaction]:
        return apply_filter(transactions, self._state)

    def monthly_stats(self, transactions: Iterable[Transaction]) -> MonthlyStats:
        """Monthly summary for the selected month over the unfiltered ledger."""
        return monthly_stats(transactions, self._state.month)
