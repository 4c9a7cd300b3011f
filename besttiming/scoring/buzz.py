# besttiming/scoring/buzz.py
"""
Buzz score (1.0-10.0) from social-mention volume.

ratio = this month's count / mean of the months that have data
score = 3 + 7 * sigmoid(4 * (ratio - 1))

ratio 1.0 -> 6.5, 1.5 -> 9.2, 0.5 -> 3.8. Missing data -> 5.0.
"""
from __future__ import annotations

import math
from typing import Optional

from ..errors import require_month
from ..signals import SignalSource
from .rounding import clamp_score

NEUTRAL_SCORE = 5.0


def buzz_score_from_counts(month_count: Optional[float], annual_average: Optional[float]) -> float:
    if month_count is None or not annual_average:
        return NEUTRAL_SCORE

    ratio = month_count / annual_average
    score = 3 + 7 * (1 / (1 + math.exp(-4 * (ratio - 1))))
    return clamp_score(score)


def buzz_score(destination_id: str, month: int, signals: SignalSource) -> float:
    require_month(month)
    counts = {m: c for m, c in signals.buzz_counts(destination_id).items() if c is not None}
    if not counts:
        return NEUTRAL_SCORE
    annual_average = sum(counts.values()) / len(counts)
    return buzz_score_from_counts(counts.get(month), annual_average)
