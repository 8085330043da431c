"""Utility functions for paytrack."""

from paytrack.utils.date_parser import parse_date, normalize_expected_date
from paytrack.utils.amount_parser import parse_amount, coerce_amount
from paytrack.utils.currency import format_currency

__all__ = [
    "parse_date",
    "normalize_expected_date",
    "parse_amount",
    "coerce_amount",
    "format_currency",
]
