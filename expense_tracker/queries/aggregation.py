"""
Aggregation Engine

DESIGN DECISION: Aggregation is PURE.
Every function here takes a snapshot of transactions and returns a value.
Nothing reads storage, nothing mutates the ledger, nothing remembers
previous calls. The same input always gives the same answer.

Amounts are summed as Decimal so repeated additions do not drift;
rounding to cents happens only when formatting for display.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional, Union

from expense_tracker.models.summary import MonthKey, MonthlyStats, Totals
from expense_tracker.models.transaction import Transaction, TransactionType


ALL = "all"

MonthSelector = Union[MonthKey, str, None]

ZERO = Decimal("0")


def _sum_by_type(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (income, expenses)."""
    income = ZERO
    expenses = ZERO
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expenses += transaction.amount
    return income, expenses


def totals(transactions: Iterable[Transaction]) -> Totals:
    """Income, expenses and balance over the given transactions."""
    income, expenses = _sum_by_type(transactions)
    return Totals(income=income, expenses=expenses, balance=income - expenses)


def month_of(transaction: Transaction) -> MonthKey:
    return MonthKey.of(transaction.date)


def resolve_month(month: MonthSelector) -> Optional[MonthKey]:
    """
    Normalize a month selector.

    Returns:
        None for "all" (or None), otherwise the MonthKey

    Raises:
        ValueError: If a string selector is not a recognizable month
    """
    if month is None:
        return None
    if isinstance(month, MonthKey):
        return month
    if month.strip().lower() == ALL:
        return None
    return MonthKey.parse(month)


def in_month(transactions: Iterable[Transaction], month: MonthSelector) -> list[Transaction]:
    """Transactions whose date falls in the month (all of them for "all")."""
    key = resolve_month(month)
    if key is None:
        return list(transactions)
    return [t for t in transactions if key.contains(t.date)]


def monthly_stats(transactions: Iterable[Transaction], month: MonthSelector = ALL) -> MonthlyStats:
    """
    Count, income, expenses and net for one calendar month.

    Args:
        transactions: The full (unfiltered) ledger snapshot
        month: "all", a MonthKey, or a label such as "March 2024" / "2024-03"
    """
    selected = in_month(transactions, month)
    income, expenses = _sum_by_type(selected)
    return MonthlyStats(
        count=len(selected),
        income=income,
        expenses=expenses,
        net=income - expenses,
    )


def observed_months(transactions: Iterable[Transaction]) -> list[MonthKey]:
    """Distinct months present in transaction dates, most recent first."""
    return sorted({month_of(t) for t in transactions}, reverse=True)


def recent(transactions: Sequence[Transaction], limit: int = 5) -> list[Transaction]:
    """The first `limit` transactions in ledger order."""
    if limit <= 0:
        return []
    return list(transactions[:limit])


def category_breakdown(
    transactions: Iterable[Transaction],
    txn_type: Optional[TransactionType] = None,
) -> dict[str, Decimal]:
    """
    Sum of amounts per category, largest first.

    Args:
        txn_type: Restrict to income or expense; None sums both
    """
    sums: dict[str, Decimal] = {}
    for transaction in transactions:
        if txn_type is not None and transaction.type != txn_type:
            continue
        sums[transaction.category] = sums.get(transaction.category, ZERO) + transaction.amount
    return dict(sorted(sums.items(), key=lambda item: (-item[1], item[0])))
