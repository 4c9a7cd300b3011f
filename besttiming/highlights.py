# besttiming/highlights.py
"""
Rule-based highlight tags for a (destination, month) score.

Pure utility: no I/O, and tags never feed back into scores.

Priority (stop at MAX_HIGHLIGHTS):
  1. season label from the calendar (first window touching the month)
  2. weather >= 8 -> GREAT_WEATHER (only without a season label)
     weather <= 3 -> WEATHER_CAUTION
  3. cost    >= 8 -> FAVORABLE_RATE,  <= 3 -> HIGH_COST
  4. crowd   >= 8 -> OFF_PEAK,        <= 3 -> PEAK_SEASON
  5. buzz    >= 8 -> TRENDING
  6. total   >= 8.5 and fewer than 3 tags -> STRONGLY_RECOMMENDED
"""
from __future__ import annotations

from .catalog.seasons import DEFAULT_CALENDAR, SeasonCalendar
from .models import ScoreBreakdown

MAX_HIGHLIGHTS = 3

GREAT_WEATHER = "Great weather"
WEATHER_CAUTION = "Weather caution"
FAVORABLE_RATE = "Favorable exchange rate"
HIGH_COST = "High cost of living"
OFF_PEAK = "Off-peak, quiet"
PEAK_SEASON = "Crowded peak season"
TRENDING = "Trending on social media"
STRONGLY_RECOMMENDED = "Strongly recommended"

HIGH = 8.0
LOW = 3.0
RECOMMEND_TOTAL = 8.5


def generate_highlights(
    destination_id: str,
    month: int,
    scores: ScoreBreakdown,
    calendar: SeasonCalendar = DEFAULT_CALENDAR,
) -> list[str]:
    tags: list[str] = []

    def add(tag: str) -> None:
        if tag not in tags:
            tags.append(tag)

    season_label = calendar.label_for_month(destination_id, month)
    if season_label:
        add(season_label)

    if scores.weather >= HIGH:
        if not season_label:
            add(GREAT_WEATHER)
    elif scores.weather <= LOW:
        add(WEATHER_CAUTION)

    if scores.cost >= HIGH:
        add(FAVORABLE_RATE)
    elif scores.cost <= LOW:
        add(HIGH_COST)

    if scores.crowd >= HIGH:
        add(OFF_PEAK)
    elif scores.crowd <= LOW:
        add(PEAK_SEASON)

    if scores.buzz >= HIGH:
        add(TRENDING)

    if scores.total >= RECOMMEND_TOTAL and len(tags) < MAX_HIGHLIGHTS:
        add(STRONGLY_RECOMMENDED)

    return tags[:MAX_HIGHLIGHTS]
