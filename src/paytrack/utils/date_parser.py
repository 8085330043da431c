"""Date parsing utilities for expected payment dates."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-05-01", "May 1, 2024") and a few relative
    forms: "today", "tomorrow", "yesterday", "this month", "next month",
    "end of month", "next week".

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if not date_str:
        raise ValueError("Empty date string")
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "end of month": today + relativedelta(day=31),
        "next week": today + timedelta(days=(7 - today.weekday())),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def normalize_expected_date(date_str: Optional[str], today: Optional[date] = None) -> str:
    """Normalize user input for an expected date to ISO text.

    Empty input stays empty; the expected date is optional.
    """
    if date_str is None or not date_str.strip():
        return ""
    return parse_date(date_str, today=today).isoformat()


def to_date(value: Optional[str]) -> Optional[date]:
    """Read a stored expected date. Returns None unless it is an ISO date.

    Stored dates are normalized to ISO text on input, so anything else is
    treated as missing rather than guessed at.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def month_range(today: Optional[date] = None) -> tuple[date, date]:
    """Return the first and last day of the calendar month containing today."""
    today = today or date.today()
    start_date = today.replace(day=1)
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
