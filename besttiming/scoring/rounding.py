# besttiming/scoring/rounding.py
"""
Half-up rounding for displayed scores.

Python's round() is banker's rounding (round(0.25, 1) == 0.2); scores are
shown with half-up semantics (0.25 -> 0.3), so everything goes through here.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

ONE_DECIMAL = Decimal("0.1")
TWO_DECIMALS = Decimal("0.01")


def round1(value: float) -> float:
    return float(Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(TWO_DECIMALS, rounding=ROUND_HALF_UP))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_score(value: float) -> float:
    """Clamp to the [1.0, 10.0] score range and round to one decimal."""
    return clamp(round1(value), 1.0, 10.0)
