# tests/test_calculate_today_best.py
"""
Tests for scripts/calculate_today_best.py: fixture signals, no forecast
service, mocked Supabase.
"""
from __future__ import annotations

import json
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

from besttiming.scoring.composite import ScoreEngine
from besttiming.signals import FixtureSignals
from besttiming.today_best import TodayBestEngine
from scripts.calculate_today_best import calculate_today_best

TODAY = date(2026, 3, 1)
GENERATED_AT = datetime(2026, 3, 1, 6, 0, tzinfo=timezone.utc)


def _engine() -> TodayBestEngine:
    return TodayBestEngine(ScoreEngine(FixtureSignals.default(), today=lambda: TODAY))


def _run(**kwargs):
    return calculate_today_best(_engine(), today=TODAY, clock=lambda: GENERATED_AT, **kwargs)


def _make_supabase(*, upsert_ok: bool = True) -> tuple[MagicMock, MagicMock]:
    sb = MagicMock()
    builder = MagicMock()
    builder.upsert.return_value = builder
    if upsert_ok:
        builder.execute.return_value = MagicMock(data=[])
    else:
        builder.execute.side_effect = RuntimeError("permission denied")
    sb.table.return_value = builder
    return sb, builder


class TestDryRun:

    def test_ranking_and_row(self, capsys):
        result = _run()

        assert result.dry_run is True
        assert len(result.rankings) == 10
        assert result.written == 0
        assert result.row["date"] == "2026-03-01"
        assert result.row["generated_at"] == GENERATED_AT.isoformat()
        assert "[today_best] #1 " in capsys.readouterr().out

    def test_rankings_stored_as_camel_case_json(self):
        row = _run().row
        rankings = json.loads(row["rankings"])
        assert [r["rank"] for r in rankings] == list(range(1, 11))
        assert "recommendedPeriod" in rankings[0]
        assert "baseScore" in rankings[0]

    def test_no_writes(self):
        sb, _ = _make_supabase()
        _run(supabase=sb)
        sb.table.assert_not_called()


class TestWrite:

    def test_upsert_on_date(self):
        sb, builder = _make_supabase()
        result = _run(supabase=sb, dry_run=False)

        sb.table.assert_called_once_with("today_best_cache")
        args, kwargs = builder.upsert.call_args
        assert kwargs == {"on_conflict": "date"}
        assert args[0] == result.row
        assert result.written == 1
        assert result.errors == 0

    def test_upsert_error_counted(self):
        sb, _ = _make_supabase(upsert_ok=False)
        result = _run(supabase=sb, dry_run=False)
        assert result.errors == 1
        assert result.written == 0

    def test_write_without_client(self):
        with pytest.raises(RuntimeError):
            _run(dry_run=False)
