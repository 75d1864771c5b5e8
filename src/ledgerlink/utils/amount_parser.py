"""Amount parsing and formatting utilities."""

from decimal import Decimal, InvalidOperation
from fractions import Fraction
import math
import re

MINOR_UNITS_PER_WHOLE = 100

_NON_CURRENCY_CHARS = re.compile(r"[^0-9.\-]")


def parse_currency_minor_units(value_str: str) -> int:
    """Parse a currency string into minor units (cents).

    Everything except digits, "-" and "." is discarded first, so
    "$1,234.56" and "1234.56 USD" are equivalent. Only the first two digits
    after the decimal point are used; further digits are truncated.

    Examples:
    - "$56.91" -> 5691
    - "-1,234" -> -123400
    - "5.5" -> 550
    - "0.999" -> 99

    Args:
        value_str: Currency string

    Returns:
        Signed number of minor units

    Raises:
        ValueError: If the string cannot be read as a single signed amount
    """
    cleaned = _NON_CURRENCY_CHARS.sub("", value_str or "")

    if cleaned.count("-") > 1:
        raise ValueError(f"Amount '{value_str}' has more than one '-'")
    if cleaned.count(".") > 1:
        raise ValueError(f"Amount '{value_str}' has more than one '.'")
    if "-" in cleaned and not cleaned.startswith("-"):
        raise ValueError(f"Amount '{value_str}' has a '-' that is not leading")

    is_negative = cleaned.startswith("-")
    unsigned = cleaned.lstrip("-")
    whole, _, fraction = unsigned.partition(".")
    if not whole and not fraction:
        raise ValueError(f"Amount '{value_str}' has no digits")

    # Truncate (never round) to two fractional digits.
    cents = (fraction + "00")[:2]
    minor_units = int(whole or "0") * MINOR_UNITS_PER_WHOLE + int(cents)
    return -minor_units if is_negative else minor_units


def parse_ledger_amount(amount_str: str) -> Decimal:
    """Parse a ledger-style amount such as "$-1,000.50" into an exact Decimal.

    Raises:
        ValueError: If amount string cannot be parsed
    """
    cleaned = amount_str.strip().replace("$", "").replace(",", "")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")


def format_ledger_currency(amount: Fraction | Decimal | int) -> str:
    """Format an amount as ledger currency, e.g. "$-99.00".

    Amounts with more than two fractional digits are truncated toward zero.
    """
    value = Fraction(amount)
    sign = "-" if value < 0 else ""
    cents = math.floor(abs(value) * MINOR_UNITS_PER_WHOLE)
    return f"${sign}{cents // MINOR_UNITS_PER_WHOLE}.{cents % MINOR_UNITS_PER_WHOLE:02d}"


def format_currency(amount: Fraction | Decimal | int) -> str:
    """Format an amount for display, e.g. "-$1,234.50"."""
    value = Fraction(amount)
    sign = "-" if value < 0 else ""
    cents = math.floor(abs(value) * MINOR_UNITS_PER_WHOLE)
    return f"{sign}${cents // MINOR_UNITS_PER_WHOLE:,}.{cents % MINOR_UNITS_PER_WHOLE:02d}"
