"""
Core Module - Numeric Guards.

============================================================
RESPONSIBILITY
============================================================
Guarded arithmetic shared by every scorer:

- Division never raises and never yields NaN / inf
- Rounding is half-up, not banker's rounding
- Scores are clamped into their declared range

============================================================
"""

from decimal import Decimal, ROUND_HALF_UP
import math
from typing import Optional, Union


Number = Union[int, float]


def safe_div(
    numerator: Optional[Number],
    denominator: Optional[Number],
    default: float = 0.0,
) -> float:
    """
    Division that returns `default` instead of failing.

    Examples:
        >>> safe_div(10, 4)
        2.5
        >>> safe_div(10, 0)
        0.0
        >>> safe_div(None, 10, default=-1.0)
        -1.0
    """
    if numerator is None or denominator is None or denominator == 0:
        return default
    result = float(numerator) / float(denominator)
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def round_half_up(value: Number, ndigits: int = 0) -> float:
    """
    Round halves away from zero (2.5 -> 3, -2.5 -> -3).

    Examples:
        >>> round_half_up(12.5)
        13.0
        >>> round_half_up(2.345, 2)
        2.35
    """
    if math.isnan(value) or math.isinf(value):
        return 0.0
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: Number, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp value into [low, high]; NaN maps to low."""
    if math.isnan(value):
        return low
    return max(low, min(float(value), high))
