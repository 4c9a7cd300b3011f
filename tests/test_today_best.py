# tests/test_today_best.py
"""Today's best Top 10: week windows, bonuses, ordering, failure isolation."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from besttiming.catalog.seasons import SeasonCalendar
from besttiming.errors import UpstreamUnavailableError
from besttiming.forecast.provider import make_forecast_day
from besttiming.forecast.service import build_summary
from besttiming.models import Destination
from besttiming.scoring.composite import ScoreEngine
from besttiming.scoring.rounding import round1
from besttiming.signals import FixtureSignals, RatePoint
from besttiming.today_best import (
    MAX_REASONS,
    TodayBestEngine,
    season_bonus,
    timeliness_bonus,
    upcoming_weeks,
    within_forecast,
)

TODAY = date(2026, 3, 1)  # Sunday
T0 = datetime(2026, 3, 1, tzinfo=timezone.utc)


class _StubForecast:
    """All-clear forecast for every destination except the ones in `fail`."""

    forecast_days = 14

    def __init__(self, fail=(), *, clear_code: int = 0):
        self.fail = set(fail)
        self.clear_code = clear_code
        self.calls: list[str] = []

    def get_forecast(self, destination_id, latitude, longitude):
        self.calls.append(destination_id)
        if destination_id in self.fail:
            raise UpstreamUnavailableError("forecast down", status_code=503)
        days = [make_forecast_day(f"2026-03-{i:02d}", 20.0, 10.0, 0.0, self.clear_code) for i in range(1, 15)]
        return build_summary(destination_id, days, 0.6, T0)


def _engine(signals=None) -> ScoreEngine:
    return ScoreEngine(signals or FixtureSignals.default(), today=lambda: TODAY)


def _by_id(items):
    return {item.destination.id: item for item in items}


class TestUpcomingWeeks:

    def test_starts_next_monday(self):
        weeks = upcoming_weeks(TODAY)
        assert len(weeks) == 12
        assert weeks[0].start == date(2026, 3, 2)
        assert weeks[0].end == date(2026, 3, 8)
        assert weeks[0].label == "Mar week 1"
        assert weeks[0].weeks_from_now == 1

    def test_monday_today_skips_to_following_week(self):
        assert upcoming_weeks(date(2026, 3, 2))[0].start == date(2026, 3, 9)

    def test_consecutive_mondays(self):
        weeks = upcoming_weeks(TODAY)
        for prev, cur in zip(weeks, weeks[1:]):
            assert cur.start - prev.start == timedelta(days=7)
        assert all(w.start.weekday() == 0 for w in weeks)
        assert weeks[-1].start == date(2026, 5, 18)
        assert weeks[-1].label == "May week 3"
        assert weeks[-1].month == 5


class TestBonuses:

    def test_season_open(self):
        assert season_bonus("osaka", date(2026, 3, 30), date(2026, 3, 25)) == (0.5, "Cherry blossom season")

    def test_season_approaching(self):
        bonus, reason = season_bonus("osaka", date(2026, 3, 23), TODAY)
        assert bonus == 0.34
        assert reason == "Cherry blossom season starts in 19 days"

    def test_season_too_far(self):
        assert season_bonus("osaka", date(2026, 3, 23), date(2026, 1, 1)) == (0.0, None)

    def test_week_outside_every_window(self):
        assert season_bonus("osaka", date(2026, 6, 1), TODAY) == (0.0, None)

    def test_timeliness(self):
        assert timeliness_bonus(1) == (0.3, "Coming up soon")
        bonus, reason = timeliness_bonus(2)
        assert 0.25 < bonus < 0.3
        assert reason == "Coming up soon"
        bonus, reason = timeliness_bonus(12)
        assert 0 < bonus < 0.05
        assert reason is None

    def test_timeliness_decreasing(self):
        values = [timeliness_bonus(w)[0] for w in range(1, 13)]
        assert values == sorted(values, reverse=True)


class TestRankToday:

    def test_top_ten_sorted(self):
        items = TodayBestEngine(_engine(), _StubForecast()).rank_today(TODAY)

        assert len(items) == 10
        assert [i.rank for i in items] == list(range(1, 11))
        keys = [(-i.score, i.destination.id) for i in items]
        assert keys == sorted(keys)

    def test_score_is_base_plus_bonuses(self):
        for item in TodayBestEngine(_engine(), _StubForecast()).rank_today(TODAY):
            assert item.score == round1(item.base_score + item.bonuses.total)
            in_window = (item.recommended_period.start - TODAY).days < 14
            assert item.bonuses.forecast == (0.5 if in_window else 0.0)
            assert len(item.reasons) <= MAX_REASONS
            assert len(item.reasons) == len(set(item.reasons))
            assert item.recommended_period.start.weekday() == 0

    def test_deterministic(self):
        engine = TodayBestEngine(_engine(), _StubForecast())
        first = [i.to_json_dict() for i in engine.rank_today(TODAY)]
        second = [i.to_json_dict() for i in engine.rank_today(TODAY)]
        assert first == second

    def test_ties_broken_by_id(self):
        def _dest(id: str) -> Destination:
            return Destination(
                id=id, name_local=id, name_en=id, country="Nowhere", country_code="XX",
                currency="XXX", latitude=20.0, longitude=100.0,
            )

        engine = TodayBestEngine(
            _engine(FixtureSignals()),
            destinations=lambda: [_dest("bbb"), _dest("aaa")],
            calendar=SeasonCalendar([]),
        )
        items = engine.rank_today(TODAY)
        assert [i.destination.id for i in items] == ["aaa", "bbb"]
        assert items[0].score == items[1].score

    def test_forecast_failure_only_zeroes_that_destination(self):
        ok = _by_id(TodayBestEngine(_engine(), _StubForecast(), top_n=20).rank_today(TODAY))
        partial = _by_id(TodayBestEngine(_engine(), _StubForecast(fail={"osaka"}), top_n=20).rank_today(TODAY))

        assert set(ok) == set(partial)
        assert partial["osaka"].bonuses.forecast == 0.0
        for city_id in ok:
            if city_id == "osaka":
                continue
            assert partial[city_id].score == ok[city_id].score
            assert partial[city_id].bonuses == ok[city_id].bonuses

    def test_one_forecast_call_per_destination(self):
        stub = _StubForecast()
        TodayBestEngine(_engine(), stub).rank_today(TODAY)
        assert sorted(stub.calls) == sorted(set(stub.calls))
        assert len(stub.calls) == 20

    def test_without_forecast_service(self):
        items = TodayBestEngine(_engine()).rank_today(TODAY)
        assert all(i.bonuses.forecast == 0.0 for i in items)

    def test_exchange_rate_bonus(self):
        rates = [RatePoint(TODAY - timedelta(days=i), 10.0) for i in range(1, 61)]
        rates.append(RatePoint(TODAY, 9.9))
        signals = FixtureSignals(rates={"JPY": rates}, synthetic_buzz=True)

        items = _by_id(TodayBestEngine(_engine(signals), top_n=20).rank_today(TODAY))
        assert items["tokyo"].bonuses.exchange_rate == 1.0
        assert items["tokyo"].reasons[0] == "Exchange rate at a 3-month low"
        assert items["bangkok"].bonuses.exchange_rate == 0.0

    def test_json_shape(self):
        item = TodayBestEngine(_engine(), _StubForecast()).rank_today(TODAY)[0].to_json_dict()
        assert set(item) == {"rank", "city", "recommendedPeriod", "score", "baseScore", "bonuses", "reasons"}
        assert set(item["bonuses"]) == {"exchangeRate", "forecast", "season", "timeliness"}
        assert item["recommendedPeriod"]["start"] >= "2026-03-02"


def _equator_dest(id: str = "aaa") -> Destination:
    return Destination(
        id=id, name_local=id, name_en=id, country="Nowhere", country_code="XX",
        currency="XXX", latitude=0.0, longitude=100.0,
    )


class TestForecastWindow:

    def test_within_forecast(self):
        weeks = upcoming_weeks(TODAY)
        assert [within_forecast(w, TODAY, 14) for w in weeks[:4]] == [True, True, False, False]

    def test_bonus_skipped_past_forecast_window(self):
        # Rainy forecast (-0.5): the first week outside the 14-day window wins
        engine = TodayBestEngine(
            _engine(FixtureSignals()),
            _StubForecast(clear_code=61),
            destinations=lambda: [_equator_dest()],
            calendar=SeasonCalendar([]),
        )
        item = engine.rank_today(TODAY)[0]

        assert item.recommended_period.start == date(2026, 3, 16)
        assert item.bonuses.forecast == 0.0
        assert not any(r.startswith("Clear days") for r in item.reasons)

    def test_bonus_applied_inside_window(self):
        engine = TodayBestEngine(
            _engine(FixtureSignals()),
            _StubForecast(),
            destinations=lambda: [_equator_dest()],
            calendar=SeasonCalendar([]),
        )
        item = engine.rank_today(TODAY)[0]

        assert item.recommended_period.start == date(2026, 3, 2)
        assert item.bonuses.forecast == 0.5
        assert item.reasons[0].startswith("Clear days 100%")


class _CountingSignals(FixtureSignals):
    def __init__(self):
        super().__init__()
        self.refreshes = 0

    def refresh(self):
        self.refreshes += 1


def test_each_ranking_pass_refreshes_signals():
    signals = _CountingSignals()
    engine = TodayBestEngine(_engine(signals), destinations=lambda: [_equator_dest()])
    engine.rank_today(TODAY)
    engine.rank_today(TODAY)
    assert signals.refreshes == 2
