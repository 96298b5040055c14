"""Display formatting for amounts and percentages used in insight messages."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}

Number = Union[Decimal, int, float]


def round_half_up(value: Number, places: int = 2) -> Decimal:
    """Round to a fixed number of decimal places, halves away from zero.

    Example:
        >>> round_half_up(Decimal("12.345"))
        Decimal('12.35')
        >>> round_half_up(Decimal("49.95"), 1)
        Decimal('50.0')
    """
    quantum = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def format_currency(amount: Number, currency: str = "USD", decimals: int = 2) -> str:
    """Format an amount with its currency symbol and thousands separators.

    Currencies without a known symbol are prefixed with their ISO code.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '$1,234.50'
        >>> format_currency(Decimal("-20"), "CHF", decimals=0)
        '-CHF 20'
    """
    value = round_half_up(amount, decimals)
    sign = "-" if value < 0 else ""
    formatted = f"{abs(value):,.{decimals}f}"
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol:
        return f"{sign}{symbol}{formatted}"
    return f"{sign}{code} {formatted}"


def format_percent(value: Number, decimals: int = 1) -> str:
    """Format a percentage, e.g. ``format_percent(Decimal("12.34")) -> '12.3%'``."""
    return f"{round_half_up(value, decimals)}%"
