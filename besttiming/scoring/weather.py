# besttiming/scoring/weather.py
"""
Latitude-based weather score (1.0-10.0).

Pure utility, no I/O. A representative temperature and clear-sky ratio are
estimated from the latitude band, with a cosine seasonal phase peaking in
local summer (July north of the equator, January south of it).

  weather = 0.5 * temp_score + 0.5 * clear_score

Temperature: full marks at 21.5 C; -0.3/C inside 15-28 C, -0.6/C below 15 C,
-0.5/C above 28 C, floor 1. Clear ratio maps linearly from [0, 1] to [1, 10].
"""
from __future__ import annotations

import math

from ..errors import require_month
from .rounding import clamp_score

IDEAL_TEMP_C = 21.5
COMFORT_MIN_C = 15.0
COMFORT_MAX_C = 28.0


def _local_month(month: int, latitude: float) -> int:
    """Shift southern-hemisphere months by six so July is always local summer."""
    offset = 6 if latitude < 0 else 0
    return ((month - 1 + offset) % 12) + 1


def _seasonal_factor(month: int, latitude: float) -> float:
    """+1 in local mid-summer, -1 in local mid-winter."""
    return math.cos((_local_month(month, latitude) - 7) * math.pi / 6)


def estimate_monthly_temp(month: int, latitude: float) -> float:
    # Annual mean ~27 C at the equator, colder and more seasonal poleward
    abs_lat = abs(latitude)
    base = 27 - abs_lat * 0.6
    amplitude = abs_lat * 0.35
    return base + amplitude * _seasonal_factor(month, latitude)


def estimate_clear_ratio(month: int, latitude: float) -> float:
    abs_lat = abs(latitude)

    # Tropical: wet season May-Oct (local), otherwise mostly clear
    if abs_lat <= 15:
        local = _local_month(month, latitude)
        return 0.45 if 5 <= local <= 10 else 0.7

    factor = _seasonal_factor(month, latitude)

    # Sub-tropical: humid summers, dry winters
    if abs_lat <= 30:
        return 0.55 - 0.1 * factor

    # Temperate: clearer summers, grey winters
    if abs_lat <= 50:
        return 0.5 + 0.2 * factor

    # High latitude
    return 0.4 + 0.25 * factor


def temperature_score(temp_c: float) -> float:
    if COMFORT_MIN_C <= temp_c <= COMFORT_MAX_C:
        return 10 - abs(temp_c - IDEAL_TEMP_C) * 0.3
    if temp_c < COMFORT_MIN_C:
        return max(1.0, 10 - (COMFORT_MIN_C - temp_c) * 0.6)
    return max(1.0, 10 - (temp_c - COMFORT_MAX_C) * 0.5)


def clear_ratio_score(ratio: float) -> float:
    ratio = max(0.0, min(1.0, ratio))
    return 1 + ratio * 9


def weather_score(month: int, latitude: float) -> float:
    require_month(month)
    temp = estimate_monthly_temp(month, latitude)
    clear = estimate_clear_ratio(month, latitude)
    raw = 0.5 * temperature_score(temp) + 0.5 * clear_ratio_score(clear)
    return clamp_score(raw)
