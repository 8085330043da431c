"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Any

# Largest value the payments.amount column (Numeric(14, 2)) holds
MAX_AMOUNT = Decimal("999999999999.99")

_PLAIN_NUMBER = re.compile(r"^\d+(\.\d+)?$|^\.\d+$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "15000"
    - "¥15,000"
    - "$123.45"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed, is negative or exceeds MAX_AMOUNT
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    if amount_str.startswith("-"):
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    if not _PLAIN_NUMBER.match(amount_str):
        raise ValueError(f"Could not parse amount '{amount_str}'")

    amount = Decimal(amount_str)
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount must not exceed {MAX_AMOUNT:,}: '{amount_str}'")
    return amount


def coerce_amount(value: Any) -> Decimal:
    """Coerce a stored or user-entered amount to a Decimal.

    This is the one place amounts are read leniently. None, empty strings,
    booleans, NaN, infinities, negative values, values above MAX_AMOUNT and
    anything unparseable become Decimal(0).
    Numeric strings go through parse_amount.

    Args:
        value: Raw amount value (number, string, Decimal or None)

    Returns:
        Decimal amount, 0 when the value is missing or invalid
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)

    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            return Decimal(0)

    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)

    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        return Decimal(0)
    return amount
