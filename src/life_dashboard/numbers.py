"""Numeric helpers shared by calculators and adapters."""

import math


def to_non_negative_float(value: object) -> float:
    """Coerce raw input into a finite, non-negative float.

    Negative, non-numeric and non-finite values become 0.0 so that they never
    reach aggregate totals as NaN.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)
