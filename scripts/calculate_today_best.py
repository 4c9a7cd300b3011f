#!/usr/bin/env python3
# scripts/calculate_today_best.py
"""
Compute today's best-timing Top 10 and upsert it into today_best_cache.

Run daily after the exchange-rate collector, so the ranking sees the new
rates. One row per ranking date:

  today_best_cache (date, rankings, generated_at)
  rankings = JSON array of TodayBestItem (camelCase keys)
  upsert on (date)

Default: dry-run (prints the ranking, no writes). Use --write to persist.

Usage:
    python -m scripts.calculate_today_best
    python -m scripts.calculate_today_best --date 2026-03-01 --write
"""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from besttiming.config import DataSource, Settings
from besttiming.datasource import build_services
from besttiming.models import TodayBestItem
from besttiming.today_best import TodayBestEngine

logger = logging.getLogger(__name__)

TABLE = "today_best_cache"


@dataclass
class TodayBestRunResult:
    dry_run: bool
    ranking_date: date
    rankings: List[TodayBestItem] = field(default_factory=list)
    row: Optional[Dict[str, Any]] = None
    written: int = 0
    errors: int = 0


def snapshot_row(ranking_date: date, rankings: List[TodayBestItem], generated_at: datetime) -> Dict[str, Any]:
    return {
        "date": ranking_date.isoformat(),
        "rankings": json.dumps([r.to_json_dict() for r in rankings], ensure_ascii=False),
        "generated_at": generated_at.isoformat(),
    }


def calculate_today_best(
    engine: TodayBestEngine,
    *,
    supabase: Any = None,
    today: Optional[date] = None,
    dry_run: bool = True,
    clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> TodayBestRunResult:
    today = today or date.today()
    result = TodayBestRunResult(dry_run=dry_run, ranking_date=today)

    result.rankings = engine.rank_today(today)
    for item in result.rankings:
        print(
            f"[today_best] #{item.rank} {item.destination.id}"
            f" score={item.score} base={item.base_score}"
            f" period={item.recommended_period.label}"
        )
    result.row = snapshot_row(today, result.rankings, clock())

    if dry_run:
        return result

    if supabase is None:
        raise RuntimeError("--write needs a live Supabase client (BEST_TIMING_DATA_SOURCE=live).")

    try:
        supabase.table(TABLE).upsert(result.row, on_conflict="date").execute()
        result.written = 1
    except Exception as e:
        result.errors += 1
        print(f"[today_best] UPSERT_ERROR {type(e).__name__}: {e}")

    return result


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute today's Top 10 into today_best_cache.")
    parser.add_argument("--date", type=_iso_date, default=None, help="Ranking date (YYYY-MM-DD). Default: today.")
    parser.add_argument(
        "--write",
        action="store_true",
        help="Write to DB. Default is dry-run.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = Settings.from_env()
    if args.write and settings.data_source is not DataSource.LIVE:
        print("[today_best] ERROR --write requires BEST_TIMING_DATA_SOURCE=live")
        return 1

    services = build_services(settings)
    result = calculate_today_best(
        services.today_best,
        supabase=services.supabase,
        today=args.date,
        dry_run=not args.write,
    )

    # grep '[calculate_today_best][summary]'
    print(
        f"[calculate_today_best][summary]"
        f" data_source={settings.data_source.value}"
        f" dry_run={result.dry_run}"
        f" date={result.ranking_date.isoformat()}"
        f" rankings={len(result.rankings)}"
        f" written={result.written}"
        f" errors={result.errors}"
    )
    return 0 if result.errors == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
