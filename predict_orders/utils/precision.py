"""
Fixed-point helpers for order amounts.

Amounts live in an integer domain scaled by a precision factor (1e18 by
default). Multiplying two scaled integers and dividing by the scale leaves
remainder noise, so inputs are truncated to a bounded number of significant
digits before they are combined.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_DOWN
from typing import Union

DecimalLike = Union[int, float, str, Decimal]


def retain_significant_digits(value: int, digits: int) -> int:
    """
    Truncate ``value`` toward zero, keeping at most ``digits`` significant digits.

    Low-order decimal digits beyond the budget are zeroed, never rounded:
    ``retain_significant_digits(123456, 3) == 123000`` and the sign is kept
    (``-123456 -> -123000``).

    Args:
        value: Integer to truncate
        digits: Number of significant digits to keep (>= 1)

    Returns:
        Truncated integer
    """
    if digits < 1:
        raise ValueError(f"digits must be >= 1, got {digits}")
    if value == 0:
        return 0

    magnitude = abs(value)
    excess = Decimal(magnitude).adjusted() + 1 - digits
    if excess <= 0:
        return value

    factor = 10**excess
    truncated = (magnitude // factor) * factor
    return -truncated if value < 0 else truncated


def to_wei(value: DecimalLike, decimals: int = 18) -> int:
    """
    Scale a decimal amount into the fixed-point integer domain.

    Floats go through their shortest ``str`` form so ``0.88`` becomes exactly
    ``880000000000000000``. Digits beyond ``decimals`` are dropped.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value * 10**decimals
    scaled = Decimal(str(value)).scaleb(decimals)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))
