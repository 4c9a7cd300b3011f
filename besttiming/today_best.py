# besttiming/today_best.py
"""
"Best timing right now": daily Top-N over destinations x upcoming weeks.

Every destination is evaluated for each of the 12 weeks starting next
Monday:

  score = base (composite total for the week's month)
        + exchange_rate  (0 / +0.5 / +1.0, rate near its 1- or 3-month low)
        + forecast       (ForecastSummary.score_adjustment, -0.5..+0.5;
                          only weeks starting inside the forecast window)
        + season         (0.5 * max(0, 1 - days_until_start / 60))
        + timeliness     (0.3 * (1 - (weeks_from_now - 1) / 12))

The final figure is rounded to one decimal and NOT clamped to 10. The best
week per destination is kept (earliest week on ties), then destinations
are sorted by score desc, destination id asc, and cut to the top 10.

Forecast lookups fan out over a thread pool, one per destination. A failed
lookup only zeroes that destination's forecast bonus.
"""
from __future__ import annotations

import logging
import math
from calendar import month_abbr
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from .catalog.cities import all_destinations
from .catalog.seasons import DEFAULT_CALENDAR, SeasonCalendar, days_until_season_start, is_date_in_season
from .forecast.service import DEFAULT_FORECAST_DAYS, ForecastService, comparison_text
from .highlights import generate_highlights
from .models import (
    BonusBreakdown,
    Destination,
    MonthlyScore,
    RecommendedPeriod,
    ScoreWeights,
    TodayBestItem,
)
from .scoring.composite import ScoreEngine
from .scoring.cost import exchange_rate_bonus
from .scoring.rounding import round1, round2

logger = logging.getLogger(__name__)

TOP_N = 10
WEEKS_AHEAD = 12
MAX_REASONS = 4

SEASON_MAX_BONUS = 0.5
SEASON_HORIZON_DAYS = 60
TIMELINESS_MAX_BONUS = 0.3
SOON_WEEKS = 2

Bonus = Tuple[float, Optional[str]]


@dataclass(frozen=True)
class WeekRange:
    start: date
    end: date
    label: str
    month: int
    weeks_from_now: int


def upcoming_weeks(today: date, count: int = WEEKS_AHEAD) -> List[WeekRange]:
    """`count` Monday-Sunday weeks, the first starting on the Monday after today."""
    next_monday = today + timedelta(days=7 - today.weekday())
    weeks: List[WeekRange] = []
    for i in range(count):
        start = next_monday + timedelta(weeks=i)
        week_of_month = math.ceil(start.day / 7)
        weeks.append(
            WeekRange(
                start=start,
                end=start + timedelta(days=6),
                label=f"{month_abbr[start.month]} week {week_of_month}",
                month=start.month,
                weeks_from_now=i + 1,
            )
        )
    return weeks


def season_bonus(
    destination_id: str,
    week_start: date,
    today: date,
    calendar: SeasonCalendar = DEFAULT_CALENDAR,
) -> Bonus:
    """Largest bonus among windows covering week_start; 0.5 once a window is open."""
    best: Bonus = (0.0, None)
    for window in calendar.seasons_for(destination_id):
        if not is_date_in_season(week_start.month, week_start.day, window):
            continue
        days = days_until_season_start(today, window)
        bonus = round2(SEASON_MAX_BONUS * max(0.0, 1 - days / SEASON_HORIZON_DAYS))
        if bonus <= best[0]:
            continue
        reason = window.label if days == 0 else f"{window.label} starts in {days} days"
        best = (bonus, reason)
    return best


def within_forecast(week: WeekRange, today: date, horizon_days: int) -> bool:
    """True when the week starts before the forecast window runs out."""
    return (week.start - today).days < horizon_days


def timeliness_bonus(weeks_from_now: int) -> Bonus:
    bonus = round2(TIMELINESS_MAX_BONUS * max(0.0, 1 - (weeks_from_now - 1) / WEEKS_AHEAD))
    reason = "Coming up soon" if weeks_from_now <= SOON_WEEKS else None
    return bonus, reason


def _merge_reasons(*groups: List[Optional[str]]) -> List[str]:
    out: List[str] = []
    for group in groups:
        for r in group:
            if r and r not in out:
                out.append(r)
    return out[:MAX_REASONS]


class TodayBestEngine:
    def __init__(
        self,
        engine: ScoreEngine,
        forecast: Optional[ForecastService] = None,
        *,
        destinations: Callable[[], List[Destination]] = all_destinations,
        calendar: SeasonCalendar = DEFAULT_CALENDAR,
        workers: int = 8,
        top_n: int = TOP_N,
    ) -> None:
        self.engine = engine
        self.forecast = forecast
        self._destinations = destinations
        self.calendar = calendar
        self.workers = max(1, min(workers, 32))
        self.top_n = top_n

    def _forecast_bonuses(self, destinations: List[Destination]) -> Dict[str, Bonus]:
        bonuses: Dict[str, Bonus] = {d.id: (0.0, None) for d in destinations}
        if self.forecast is None or not destinations:
            return bonuses

        failed = 0
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = {
                pool.submit(self.forecast.get_forecast, d.id, d.latitude, d.longitude): d.id
                for d in destinations
            }
            for fut in as_completed(futures):
                destination_id = futures[fut]
                try:
                    summary = fut.result()
                except Exception as e:
                    failed += 1
                    logger.warning(
                        "[today_best] forecast unavailable city_id=%s: %s: %s",
                        destination_id, type(e).__name__, e,
                    )
                    continue
                reason = comparison_text(summary) if summary.comparison != "similar" else None
                bonuses[destination_id] = (summary.score_adjustment, reason)

        if failed:
            logger.info("[today_best] forecast bonus zeroed for %d/%d destinations", failed, len(destinations))
        return bonuses

    def rank_today(self, today: Optional[date] = None, weights: Optional[ScoreWeights] = None) -> List[TodayBestItem]:
        today = today or date.today()
        self.engine.signals.refresh()
        destinations = sorted(self._destinations(), key=lambda d: d.id)
        weeks = upcoming_weeks(today)
        forecast_bonuses = self._forecast_bonuses(destinations)
        horizon = self.forecast.forecast_days if self.forecast is not None else DEFAULT_FORECAST_DAYS

        best_per_city: List[Tuple[float, str, TodayBestItem]] = []
        for d in destinations:
            monthly: Dict[int, MonthlyScore] = {}
            exchange, exchange_reason = exchange_rate_bonus(
                self.engine.signals.rate_history(d.currency), today=today
            )
            city_forecast = forecast_bonuses[d.id]

            best: Optional[TodayBestItem] = None
            for week in weeks:
                if week.month not in monthly:
                    monthly[week.month] = self.engine.score_destination(d, week.month, weights)
                scores = monthly[week.month].scores

                season, season_reason = season_bonus(d.id, week.start, today, self.calendar)
                timeliness, timeliness_reason = timeliness_bonus(week.weeks_from_now)
                forecast, forecast_reason = city_forecast if within_forecast(week, today, horizon) else (0.0, None)
                bonuses = BonusBreakdown(
                    exchange_rate=exchange,
                    forecast=forecast,
                    season=season,
                    timeliness=timeliness,
                )
                final = round1(scores.total + bonuses.total)

                if best is not None and final <= best.score:
                    continue
                best = TodayBestItem(
                    rank=0,
                    destination=d,
                    recommended_period=RecommendedPeriod(start=week.start, end=week.end, label=week.label),
                    score=final,
                    base_score=scores.total,
                    bonuses=bonuses,
                    reasons=_merge_reasons(
                        [exchange_reason, forecast_reason, season_reason, timeliness_reason],
                        generate_highlights(d.id, week.month, scores, self.calendar),
                    ),
                )

            if best is not None:
                best_per_city.append((best.score, d.id, best))

        best_per_city.sort(key=lambda t: (-t[0], t[1]))
        ranked = [
            item.model_copy(update={"rank": i})
            for i, (_, _, item) in enumerate(best_per_city[: self.top_n], 1)
        ]
        logger.info(
            "[today_best] date=%s destinations=%d ranked=%d",
            today.isoformat(), len(destinations), len(ranked),
        )
        return ranked
