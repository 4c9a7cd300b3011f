# besttiming/signals.py
"""
Signal inputs for the sub-score calculators.

The collection jobs (exchange rates, public holidays, social buzz counts,
historical weather) write their results elsewhere; scoring only reads them
through a SignalSource. Two implementations exist:

  - SupabaseSignals (besttiming/db/signals.py): live tables
  - FixtureSignals (here): deterministic in-memory data, no I/O
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RatePoint:
    """Home-currency units per one unit of foreign currency on `rate_date`."""
    rate_date: date
    rate: float


class SignalSource(ABC):
    @abstractmethod
    def rate_history(self, currency: str) -> List[RatePoint]:
        """Rate history for `currency`, newest first."""

    @abstractmethod
    def holiday_count(self, country_code: str, month: int) -> int:
        """Number of public holidays in `month` for `country_code`."""

    @abstractmethod
    def buzz_counts(self, destination_id: str) -> Dict[int, int]:
        """Latest social-mention count per month (1-12) for a destination."""

    @abstractmethod
    def historical_clear_ratio(self, destination_id: str, month: int) -> Optional[float]:
        """Long-run clear-day ratio for (destination, month), or None if unknown."""

    def refresh(self) -> None:
        """Drop any cached snapshot of the signal tables. No-op by default."""


# ---------------------------------------------------------------------------
# Fixture data
# ---------------------------------------------------------------------------

# Public holidays per month, rounded to typical recent years.
FIXTURE_HOLIDAYS: Dict[str, Dict[int, int]] = {
    "KR": {1: 1, 2: 3, 3: 1, 5: 3, 6: 1, 8: 1, 9: 3, 10: 2, 12: 1},
    "JP": {1: 2, 2: 2, 3: 1, 4: 1, 5: 3, 7: 1, 8: 1, 9: 2, 10: 1, 11: 2},
    "TW": {1: 1, 2: 4, 4: 2, 5: 1, 6: 1, 9: 1, 10: 1},
    "HK": {1: 1, 2: 3, 4: 4, 5: 2, 6: 1, 7: 1, 9: 1, 10: 2, 12: 2},
    "VN": {1: 1, 2: 4, 4: 1, 5: 1, 9: 2},
    "TH": {1: 1, 2: 1, 4: 4, 5: 2, 6: 1, 7: 2, 8: 1, 10: 2, 12: 3},
    "PH": {1: 1, 2: 2, 4: 3, 5: 1, 6: 1, 8: 2, 11: 2, 12: 4},
    "ID": {1: 1, 2: 1, 3: 2, 4: 3, 5: 3, 6: 1, 8: 1, 12: 1},
    "MY": {1: 1, 2: 2, 4: 2, 5: 2, 6: 1, 8: 1, 9: 1, 10: 1, 12: 1},
    "SG": {1: 1, 2: 2, 3: 1, 4: 1, 5: 2, 6: 1, 8: 1, 10: 1, 12: 1},
    "US": {1: 2, 2: 1, 5: 1, 6: 1, 7: 1, 9: 1, 10: 1, 11: 2, 12: 1},
    "FR": {1: 1, 4: 1, 5: 4, 7: 1, 8: 1, 11: 2, 12: 1},
    "GB": {1: 1, 4: 2, 5: 2, 8: 1, 12: 2},
    "ES": {1: 2, 4: 2, 5: 1, 8: 1, 10: 1, 11: 1, 12: 3},
    "AU": {1: 2, 3: 1, 4: 3, 6: 1, 10: 1, 12: 2},
}


def _seeded(seed: float) -> float:
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def synthetic_buzz_counts(destination_id: str) -> Dict[int, int]:
    """Deterministic pseudo mention counts: same id always gives the same series."""
    city_hash = sum(ord(c) for c in destination_id)
    return {
        month: 1000 + int(_seeded(city_hash * 13 + month * 7) * 2000)
        for month in range(1, 13)
    }


class FixtureSignals(SignalSource):
    def __init__(
        self,
        *,
        rates: Optional[Mapping[str, List[RatePoint]]] = None,
        holidays: Optional[Mapping[str, Mapping[int, int]]] = None,
        buzz: Optional[Mapping[str, Mapping[int, int]]] = None,
        clear_ratios: Optional[Mapping[Tuple[str, int], float]] = None,
        synthetic_buzz: bool = False,
    ) -> None:
        self._rates = {k.upper(): list(v) for k, v in (rates or {}).items()}
        self._holidays = {k.upper(): dict(v) for k, v in (holidays or {}).items()}
        self._buzz = {k: dict(v) for k, v in (buzz or {}).items()}
        self._clear_ratios = dict(clear_ratios or {})
        self._synthetic_buzz = synthetic_buzz

    @classmethod
    def default(cls) -> "FixtureSignals":
        """Fixture used when no database is configured."""
        return cls(holidays=FIXTURE_HOLIDAYS, synthetic_buzz=True)

    def rate_history(self, currency: str) -> List[RatePoint]:
        rows = self._rates.get((currency or "").upper(), [])
        return sorted(rows, key=lambda r: r.rate_date, reverse=True)

    def holiday_count(self, country_code: str, month: int) -> int:
        return self._holidays.get((country_code or "").upper(), {}).get(month, 0)

    def buzz_counts(self, destination_id: str) -> Dict[int, int]:
        if destination_id in self._buzz:
            return dict(self._buzz[destination_id])
        if self._synthetic_buzz:
            return synthetic_buzz_counts(destination_id)
        return {}

    def historical_clear_ratio(self, destination_id: str, month: int) -> Optional[float]:
        return self._clear_ratios.get((destination_id, month))
