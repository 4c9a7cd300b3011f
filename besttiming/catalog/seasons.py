# besttiming/catalog/seasons.py
"""
Season calendar: named date windows per destination.

A window may wrap the year boundary (start > end, e.g. Nov 1 -> Feb 28).
Windows of one destination may overlap; table order decides which label
wins when several cover the same month.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from ..errors import InvalidArgumentError


@dataclass(frozen=True)
class SeasonWindow:
    destination_id: str
    label: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int

    def __post_init__(self) -> None:
        for m, d in ((self.start_month, self.start_day), (self.end_month, self.end_day)):
            try:
                # 2000 is a leap year, so Feb 29 is accepted
                date(2000, m, d)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"Invalid season date {m}/{d} for {self.destination_id}:{self.label}"
                ) from e

    @property
    def wraps_year(self) -> bool:
        return (self.start_month, self.start_day) > (self.end_month, self.end_day)


def _w(destination_id: str, label: str, sm: int, sd: int, em: int, ed: int) -> SeasonWindow:
    return SeasonWindow(destination_id, label, sm, sd, em, ed)


SEASONS: tuple[SeasonWindow, ...] = (
    # Japan
    _w("osaka", "Cherry blossom season", 3, 20, 4, 15),
    _w("osaka", "Autumn foliage season", 10, 20, 11, 30),
    _w("tokyo", "Cherry blossom season", 3, 20, 4, 10),
    _w("tokyo", "Autumn foliage season", 11, 10, 12, 5),
    _w("tokyo", "Winter illuminations", 11, 15, 12, 25),
    _w("fukuoka", "Cherry blossom season", 3, 20, 4, 10),
    _w("fukuoka", "Hakata Gion Yamakasa", 7, 1, 7, 15),
    _w("sapporo", "Snow Festival", 2, 4, 2, 11),
    _w("sapporo", "Lavender season", 7, 1, 8, 15),
    _w("sapporo", "Autumn foliage season", 10, 1, 10, 31),
    _w("okinawa", "Beach season", 6, 1, 9, 30),
    _w("okinawa", "Cherry blossom season", 1, 20, 2, 15),
    # Southeast Asia
    _w("danang", "Dry season", 3, 1, 8, 31),
    _w("bangkok", "Dry season", 11, 1, 2, 28),
    _w("bangkok", "Songkran Festival", 4, 13, 4, 15),
    _w("cebu", "Dry season", 1, 1, 5, 31),
    _w("cebu", "Sinulog Festival", 1, 10, 1, 20),
    _w("bali", "Dry season", 4, 1, 10, 31),
    _w("kota-kinabalu", "Dry season", 1, 1, 5, 31),
    _w("singapore", "Great Singapore Sale", 6, 15, 8, 15),
    _w("singapore", "Christmas light-up", 11, 15, 1, 2),
    # Taiwan / Hong Kong
    _w("taipei", "Lantern Festival", 2, 1, 2, 28),
    _w("taipei", "Cherry blossom season", 2, 15, 3, 15),
    _w("hongkong", "Christmas decorations", 11, 20, 1, 2),
    _w("hongkong", "Mid-Autumn Festival", 9, 15, 10, 15),
    # Pacific / Americas
    _w("guam", "Dry season", 12, 1, 4, 30),
    _w("hawaii", "Surf season", 11, 1, 2, 28),
    _w("hawaii", "Whale watching season", 1, 15, 3, 31),
    _w("hawaii", "Beach season", 6, 1, 8, 31),
    _w("los-angeles", "Beach season", 6, 1, 9, 15),
    # Europe
    _w("paris", "Spring blossom season", 4, 1, 5, 31),
    _w("paris", "Fete de la Musique", 6, 15, 7, 15),
    _w("paris", "Christmas markets", 11, 20, 12, 31),
    _w("london", "Summer festivals", 6, 1, 8, 31),
    _w("london", "Christmas markets", 11, 15, 12, 31),
    _w("barcelona", "Beach season", 6, 1, 9, 15),
    _w("barcelona", "La Merce Festival", 9, 20, 9, 24),
    # Australia
    _w("sydney", "Summer season", 12, 1, 2, 28),
    _w("sydney", "Spring blossom season", 9, 15, 11, 15),
)


class SeasonCalendar:
    """Per-destination window lists, kept in table order."""

    def __init__(self, windows: tuple[SeasonWindow, ...] | list[SeasonWindow] = SEASONS) -> None:
        self._by_destination: dict[str, tuple[SeasonWindow, ...]] = {}
        grouped: dict[str, list[SeasonWindow]] = {}
        for w in windows:
            grouped.setdefault(w.destination_id, []).append(w)
        for k, v in grouped.items():
            self._by_destination[k] = tuple(v)

    def seasons_for(self, destination_id: str) -> tuple[SeasonWindow, ...]:
        return self._by_destination.get(destination_id, ())

    def label_for_month(self, destination_id: str, month: int) -> str | None:
        """First window (table order) that touches any day of `month`."""
        for w in self.seasons_for(destination_id):
            if window_touches_month(w, month):
                return w.label
        return None


DEFAULT_CALENDAR = SeasonCalendar()


def is_date_in_season(month: int, day: int, window: SeasonWindow) -> bool:
    current = month * 100 + day
    start = window.start_month * 100 + window.start_day
    end = window.end_month * 100 + window.end_day

    if start <= end:
        return start <= current <= end
    # wraps the year boundary
    return current >= start or current <= end


def window_touches_month(window: SeasonWindow, month: int) -> bool:
    if month in (window.start_month, window.end_month):
        return True
    return is_date_in_season(month, 1, window)


def _start_in_year(window: SeasonWindow, year: int) -> date:
    day = window.start_day
    if window.start_month == 2 and day == 29 and not calendar.isleap(year):
        day = 28
    return date(year, window.start_month, day)


def days_until_season_start(today: date, window: SeasonWindow) -> int:
    """
    0 when `today` is inside the window. Otherwise whole days until the
    next start, rolling over to next year once this year's start has passed.
    """
    if is_date_in_season(today.month, today.day, window):
        return 0

    start = _start_in_year(window, today.year)
    if start <= today:
        start = _start_in_year(window, today.year + 1)
    return (start - today).days


def seasons_for(destination_id: str) -> tuple[SeasonWindow, ...]:
    return DEFAULT_CALENDAR.seasons_for(destination_id)


def season_label_for_month(destination_id: str, month: int) -> str | None:
    return DEFAULT_CALENDAR.label_for_month(destination_id, month)
