"""Rounding used for every reported macro and quantity."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_HUNDREDTHS = Decimal("0.01")


def round2(value: float) -> float:
    """Round to 2 decimal places, halves away from zero."""
    return float(Decimal(repr(float(value))).quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))
