"""
Display formatting helpers.

Deterministic, pure functions used by the presentation layer. Amounts are
always formatted as absolute values; callers add the +/- themselves, or
use format_signed_amount.
"""

import html
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from expense_tracker.models.summary import MONTH_NAMES, MonthKey
from expense_tracker.models.transaction import Transaction, TransactionCategory


CATEGORY_ICONS = {
    TransactionCategory.FOOD.value: "🍽️",
    TransactionCategory.TRAVEL.value: "✈️",
    TransactionCategory.RENT.value: "🏠",
    TransactionCategory.SHOPPING.value: "🛍️",
    TransactionCategory.SALARY.value: "💵",
    TransactionCategory.OTHER.value: "📌",
}
DEFAULT_CATEGORY_ICON = "⚪"

CENTS = Decimal("0.01")


def format_currency(amount: Union[Decimal, float, int], symbol: str = "$") -> str:
    """
    Format the absolute value with thousands separators and two decimals.

    >>> format_currency(Decimal("-1234.5"))
    '$1,234.50'
    """
    value = abs(Decimal(str(amount))).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,.2f}"


def format_signed_amount(transaction: Transaction, symbol: str = "$") -> str:
    """Amount with a + for income and - for expenses."""
    prefix = "+" if transaction.is_income else "-"
    return f"{prefix}{format_currency(transaction.amount, symbol)}"


def format_date(day: date) -> str:
    """Short calendar form, e.g. "Mar 5, 2024"."""
    return f"{MONTH_NAMES[day.month - 1][:3]} {day.day}, {day.year}"


def format_month(month: MonthKey) -> str:
    return month.label


def category_icon(category: str) -> str:
    """Icon for a category; unknown categories get the default icon."""
    name = str(getattr(category, "value", category)).lower()
    return CATEGORY_ICONS.get(name, DEFAULT_CATEGORY_ICON)


def category_label(category: str) -> str:
    return str(getattr(category, "value", category)).replace("_", " ").title()


def category_markup(category: str) -> str:
    """Icon and label, HTML-escaped for rendering inside raw markup."""
    return f"{category_icon(category)} {html.escape(category_label(category))}"
