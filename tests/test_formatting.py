"""Tests for display formatting."""

from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.formatting import (
    DEFAULT_CATEGORY_ICON,
    category_icon,
    category_label,
    category_markup,
    format_currency,
    format_date,
    format_month,
    format_signed_amount,
)
from expense_tracker.models import MonthKey, TransactionCategory, TransactionType

from conftest import make_transaction


class TestCurrency:

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("0"), "$0.00"),
            (Decimal("5"), "$5.00"),
            (Decimal("1234.5"), "$1,234.50"),
            (Decimal("-1234.5"), "$1,234.50"),
            (Decimal("0.005"), "$0.01"),
            (1000000, "$1,000,000.00"),
            (19.99, "$19.99"),
        ],
    )
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_custom_symbol(self):
        assert format_currency(Decimal("12"), symbol="€") == "€12.00"

    def test_signed_amount(self):
        income = make_transaction(amount="100", txn_type=TransactionType.INCOME)
        expense = make_transaction(amount="40.5")
        assert format_signed_amount(income) == "+$100.00"
        assert format_signed_amount(expense) == "-$40.50"


class TestDates:

    def test_format_date(self):
        assert format_date(date(2024, 3, 5)) == "Mar 5, 2024"
        assert format_date(date(2023, 12, 25)) == "Dec 25, 2023"

    def test_format_month(self):
        assert format_month(MonthKey(year=2024, month=9)) == "September 2024"


class TestCategories:

    def test_every_known_category_has_its_own_icon(self):
        icons = {category_icon(c.value) for c in TransactionCategory}
        assert len(icons) == len(TransactionCategory)
        assert DEFAULT_CATEGORY_ICON not in icons

    def test_unknown_category_gets_default(self):
        assert category_icon("gifts") == DEFAULT_CATEGORY_ICON
        assert category_icon("") == DEFAULT_CATEGORY_ICON

    def test_enum_members_accepted(self):
        assert category_icon(TransactionCategory.RENT) == category_icon("rent")
        assert category_label(TransactionCategory.SALARY) == "Salary"

    def test_label(self):
        assert category_label("home_office") == "Home Office"

    def test_markup_escapes_custom_category(self):
        markup = category_markup("<script>alert(1)</script>")
        assert "<script>" not in markup
        assert markup.startswith(DEFAULT_CATEGORY_ICON)
        assert "&lt;Script&gt;" in markup

    def test_markup_for_known_category(self):
        assert category_markup("food") == f"{category_icon('food')} Food"
