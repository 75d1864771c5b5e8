"""Utility functions for ledgerlink."""

from ledgerlink.utils.date_parser import parse_date, parse_ledger_date
from ledgerlink.utils.amount_parser import (
    format_ledger_currency,
    parse_currency_minor_units,
    parse_ledger_amount,
)

__all__ = [
    "parse_date",
    "parse_ledger_date",
    "format_ledger_currency",
    "parse_currency_minor_units",
    "parse_ledger_amount",
]
