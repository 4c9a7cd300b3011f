# besttiming/forecast/service.py
"""
Forecast adjustment: live 14-day forecast vs the historical clear-day ratio.

Cache state per destination:
  absent -> fetch -> fresh -> (TTL elapsed) -> stale -> fetch -> fresh ...

TTL is checked lazily on every read (now - fetched_at <= ttl is fresh).
A corrupt or unreadable cache entry counts as a miss. A provider failure
is raised to the caller; this service never serves stale or made-up days
once a live fetch was required.

Adjustment (diff = clear_ratio - historical_clear_ratio, in ratio points):
  diff >= +0.10  better   min(+0.5, round1(diff * 3))
  diff <= -0.10  worse    max(-0.5, round1(diff * 3))
  otherwise      similar  0
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from ..db.forecast_cache import ForecastCache
from ..errors import CacheCorruptError, InvalidArgumentError
from ..models import ForecastDay, ForecastSummary
from ..scoring.rounding import round1, round2
from ..signals import SignalSource
from .provider import OpenMeteoProvider

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=6)
DEFAULT_FORECAST_DAYS = 14
DEFAULT_HISTORICAL_CLEAR_RATIO = 0.6
DEADBAND = 0.10
ADJUSTMENT_FACTOR = 3
MAX_ADJUSTMENT = 0.5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def compare_clear_ratio(forecast_clear_ratio: float, historical_clear_ratio: float) -> Tuple[str, float]:
    """(comparison, score adjustment) for a forecast vs its historical baseline."""
    # Ratio points, rounded so 0.5 - 0.6 lands on the -0.10 boundary
    diff = round2(forecast_clear_ratio - historical_clear_ratio)

    if diff >= DEADBAND:
        return "better", min(MAX_ADJUSTMENT, round1(diff * ADJUSTMENT_FACTOR))
    if diff <= -DEADBAND:
        return "worse", max(-MAX_ADJUSTMENT, round1(diff * ADJUSTMENT_FACTOR))
    return "similar", 0.0


def calculate_forecast_adjustment(forecast_clear_ratio: float, historical_clear_ratio: float) -> float:
    return compare_clear_ratio(forecast_clear_ratio, historical_clear_ratio)[1]


def comparison_text(summary: ForecastSummary) -> str:
    pct = round(summary.clear_ratio * 100)
    hist_pct = round(summary.historical_clear_ratio * 100)
    if summary.comparison == "better":
        return f"Clear days {pct}% · better than the historical average ({hist_pct}%)"
    if summary.comparison == "worse":
        return f"Clear days {pct}% · worse than the historical average ({hist_pct}%)"
    return f"Clear days {pct}% · similar to the historical average ({hist_pct}%)"


def build_summary(
    destination_id: str,
    days: List[ForecastDay],
    historical_clear_ratio: float,
    fetched_at: datetime,
) -> ForecastSummary:
    clear_days = sum(1 for d in days if d.is_clear)
    clear_ratio = clear_days / len(days) if days else 0.0
    avg_temp = sum((d.temp_max + d.temp_min) / 2 for d in days) / len(days) if days else 0.0

    comparison, adjustment = compare_clear_ratio(clear_ratio, historical_clear_ratio)

    return ForecastSummary(
        destination_id=destination_id,
        days=days,
        clear_days=clear_days,
        clear_ratio=round2(clear_ratio),
        avg_temp=round1(avg_temp),
        historical_clear_ratio=round2(historical_clear_ratio),
        comparison=comparison,
        score_adjustment=adjustment,
        fetched_at=fetched_at,
    )


class ForecastService:
    def __init__(
        self,
        provider: OpenMeteoProvider,
        cache: ForecastCache,
        signals: SignalSource,
        *,
        ttl: timedelta = DEFAULT_TTL,
        forecast_days: int = DEFAULT_FORECAST_DAYS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.provider = provider
        self.cache = cache
        self.signals = signals
        self.ttl = ttl
        self.forecast_days = forecast_days
        self._clock = clock

    def _fresh_cached(self, destination_id: str, now: datetime):
        try:
            cached = self.cache.read(destination_id)
        except CacheCorruptError as e:
            logger.warning("[forecast] cache corrupt city_id=%s: %s (refetching)", destination_id, e)
            return None
        except Exception as e:
            logger.warning(
                "[forecast] cache read failed city_id=%s: %s: %s (refetching)",
                destination_id, type(e).__name__, e,
            )
            return None

        if cached is None:
            return None
        if now - cached.fetched_at > self.ttl:
            logger.info("[forecast] cache stale city_id=%s fetched_at=%s", destination_id, cached.fetched_at.isoformat())
            return None
        return cached

    def _historical_clear_ratio(self, destination_id: str, days: List[ForecastDay]) -> float:
        if not days:
            return DEFAULT_HISTORICAL_CLEAR_RATIO
        ratio: Optional[float] = self.signals.historical_clear_ratio(destination_id, days[0].date.month)
        return DEFAULT_HISTORICAL_CLEAR_RATIO if ratio is None else ratio

    def get_forecast(self, destination_id: str, latitude: float, longitude: float) -> ForecastSummary:
        if not destination_id or not str(destination_id).strip():
            raise InvalidArgumentError(f"Malformed destination id: {destination_id!r}")

        now = self._clock()
        cached = self._fresh_cached(destination_id, now)

        if cached is not None:
            days, fetched_at = cached.days, cached.fetched_at
        else:
            days = self.provider.fetch(latitude, longitude, days=self.forecast_days)
            fetched_at = now
            try:
                self.cache.write(destination_id, days, fetched_at)
            except Exception as e:
                logger.warning(
                    "[forecast] cache write failed city_id=%s: %s: %s",
                    destination_id, type(e).__name__, e,
                )

        return build_summary(
            destination_id,
            days,
            self._historical_clear_ratio(destination_id, days),
            fetched_at,
        )
