"""Decimal arithmetic utilities for time amounts.

All hours, rates and balances use Decimal with two decimal places. No float.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_QUANTUM = Decimal("0.01")


def to_hours(value: Decimal | int | float | str) -> Decimal:
    """Coerce a raw value into a 2-place Decimal hour amount.

    Floats go through str() so 1.5 stays 1.50 instead of picking up binary noise.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value).quantize(_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Not a valid hour amount: {value!r}") from exc


def validate_hours(hours: Decimal) -> None:
    """Validate that an hour amount is strictly positive."""
    if hours <= 0:
        raise ValueError(f"Hours must be greater than 0, got {hours}")


def hours_to_display(hours: Decimal) -> str:
    """Convert hours to display string: 1.50 -> '1.5h', 15.00 -> '15h', -2.25 -> '-2.25h'."""
    normalized = hours.quantize(_QUANTUM, rounding=ROUND_HALF_UP).normalize()
    text = format(normalized, "f")
    return f"{text}h"


def calculate_cost(requested_hours: Decimal, time_rate: Decimal) -> Decimal:
    """Total time cost of a request: requested_hours * time_rate, rounded to cents of an hour."""
    return to_hours(requested_hours * time_rate)
