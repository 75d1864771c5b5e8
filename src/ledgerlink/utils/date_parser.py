"""Date parsing utilities.

All dates in the model are epoch seconds at midnight UTC of the calendar day.
"""

from datetime import date, datetime, timezone
import re
from typing import Optional

from dateutil import parser as date_parser

# Ledger transaction dates: YYYY-MM-DD or YYYY/MM/DD.
LEDGER_DATE_FORMATS = {
    re.compile(r"[12]\d{3}-\d{2}-\d{2}"): "%Y-%m-%d",
    re.compile(r"[12]\d{3}/\d{2}/\d{2}"): "%Y/%m/%d",
}


def is_probable_ledger_date(token: str) -> bool:
    """Return True if the token is shaped like a ledger date."""
    return any(pattern.fullmatch(token) for pattern in LEDGER_DATE_FORMATS)


def parse_ledger_date(token: str) -> date:
    """Parse a ledger date token.

    Raises:
        ValueError: If the token is not a ledger date or not a real calendar day
    """
    for pattern, date_format in LEDGER_DATE_FORMATS.items():
        if pattern.fullmatch(token):
            return datetime.strptime(token, date_format).date()
    raise ValueError(f"'{token}' is not a ledger date")


def parse_date(date_str: str, date_format: Optional[str] = None) -> date:
    """Parse a date string into a date object.

    Args:
        date_str: Date string
        date_format: Optional strptime format (e.g. "%m/%d/%Y"). When omitted the
            format is inferred by dateutil.

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip()
    if date_format:
        try:
            return datetime.strptime(date_str, date_format).date()
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}' as '{date_format}': {e}")

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_timestamp(timestamp_str: str) -> int:
    """Parse a database timestamp (e.g. "2020-10-31 10:59:00") into UTC epoch seconds.

    Raises:
        ValueError: If timestamp string cannot be parsed
    """
    try:
        parsed = date_parser.parse(timestamp_str.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse timestamp '{timestamp_str}': {e}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def to_epoch_second(day: date) -> int:
    """Return epoch seconds at midnight UTC of a calendar day."""
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())


def from_epoch_second(epoch_second: int) -> date:
    """Return the UTC calendar day of an epoch second."""
    return datetime.fromtimestamp(epoch_second, tz=timezone.utc).date()


def format_ledger_date(epoch_second: int) -> str:
    """Format epoch seconds as a ledger date, e.g. "2020-10-31"."""
    return from_epoch_second(epoch_second).isoformat()
