"""Tests for amount parsing and formatting."""

from decimal import Decimal
from fractions import Fraction

import pytest

from ledgerlink.utils.amount_parser import (
    format_currency,
    format_ledger_currency,
    parse_currency_minor_units,
    parse_ledger_amount,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("$56.91", 5691),
        ("-1,234", -123400),
        ("5.5", 550),
        ("0.999", 99),
        (".5", 50),
        ("-$3.00", -300),
        ("1234.56 USD", 123456),
    ],
)
def test_parse_currency_minor_units(value, expected):
    assert parse_currency_minor_units(value) == expected


@pytest.mark.parametrize("value", ["", "USD", "1-2", "--5", "1.2.3", "-"])
def test_parse_currency_minor_units_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_currency_minor_units(value)


def test_parse_ledger_amount():
    assert parse_ledger_amount("$-1,000.50") == Decimal("-1000.50")
    assert parse_ledger_amount("$99") == Decimal("99")


def test_parse_ledger_amount_invalid():
    with pytest.raises(ValueError, match="Could not parse amount"):
        parse_ledger_amount("$,")


def test_format_ledger_currency():
    assert format_ledger_currency(Fraction(-99)) == "$-99.00"
    assert format_ledger_currency(Decimal("12.5")) == "$12.50"
    assert format_ledger_currency(Fraction(1, 3)) == "$0.33"
    assert format_ledger_currency(0) == "$0.00"


def test_format_currency():
    assert format_currency(Fraction(-246901, 200)) == "-$1,234.50"
    assert format_currency(Decimal("1000000")) == "$1,000,000.00"
