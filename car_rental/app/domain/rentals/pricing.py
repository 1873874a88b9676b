"""
Rental pricing: flat daily rate times inclusive day count.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")


def to_money(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Normalize an amount to a Decimal rounded half-up to the cent."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        # str() first so floats coming back from the driver do not leak binary noise
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def rental_cost(daily_rate: Union[Decimal, int, float, str], days: int) -> Decimal:
    """Total cost of a rental lasting `days` inclusive days."""
    return to_money(to_money(daily_rate) * days)


def format_money(value: Union[Decimal, int, float, str, None]) -> str:
    """Fixed two-decimal rendering, e.g. "105.00"."""
    return f"{to_money(value):.2f}"
