"""Currency formatting utilities."""

import os
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Optional

from paytrack.utils.amount_parser import coerce_amount

DEFAULT_CURRENCY = "JPY"

CURRENCY_SYMBOLS = {
    "JPY": "¥",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def default_currency() -> str:
    """Return the display currency from PAYTRACK_CURRENCY, defaulting to JPY."""
    return os.environ.get("PAYTRACK_CURRENCY", DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY


def format_currency(value: Any, currency: Optional[str] = None) -> str:
    """Format an amount as currency text with no fractional digits.

    None, empty strings, NaN and other unparseable input format as zero.

    Args:
        value: Amount (number, Decimal, numeric string or None)
        currency: ISO currency code; defaults to default_currency()

    Returns:
        Formatted string such as "¥15,000"
    """
    code = (currency or default_currency()).upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")

    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if not amount.is_finite():
            amount = Decimal(0)
    else:
        amount = coerce_amount(value)

    with localcontext() as ctx:
        # Every integer digit must fit in the context precision
        ctx.prec = max(ctx.prec, amount.adjusted() + 2)
        rounded = amount.quantize(Decimal(1), rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}{symbol}{abs(rounded):,.0f}"
