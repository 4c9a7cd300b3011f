# besttiming/scoring/crowd.py
"""
Crowd score (1.0-10.0): higher means quieter.

  score = 9.0
  -2.0  month in PEAK_MONTHS (Jan, Jul, Aug, Dec)
  -1.0  per home-country holiday in the month (max 4 counted)
  -0.5  per destination-country holiday in the month (max 6 counted)
"""
from __future__ import annotations

from ..errors import require_month
from ..signals import SignalSource
from .rounding import clamp_score

PEAK_MONTHS: frozenset[int] = frozenset({1, 7, 8, 12})

BASE_SCORE = 9.0
PEAK_PENALTY = 2.0
HOME_HOLIDAY_PENALTY = 1.0
HOME_HOLIDAY_CAP = 4
LOCAL_HOLIDAY_PENALTY = 0.5
LOCAL_HOLIDAY_CAP = 6


def crowd_score_from_counts(month: int, home_holidays: int = 0, local_holidays: int = 0) -> float:
    require_month(month)
    score = BASE_SCORE

    if month in PEAK_MONTHS:
        score -= PEAK_PENALTY

    score -= min(max(home_holidays, 0), HOME_HOLIDAY_CAP) * HOME_HOLIDAY_PENALTY
    score -= min(max(local_holidays, 0), LOCAL_HOLIDAY_CAP) * LOCAL_HOLIDAY_PENALTY

    return clamp_score(score)


def crowd_score(
    country_code: str,
    month: int,
    signals: SignalSource,
    *,
    home_country_code: str = "KR",
) -> float:
    require_month(month)
    home = signals.holiday_count(home_country_code, month)
    # Home-country destinations would otherwise count the same holidays twice
    if (country_code or "").upper() == home_country_code.upper():
        local = 0
    else:
        local = signals.holiday_count(country_code, month)
    return crowd_score_from_counts(month, home, local)
