#!/usr/bin/env python3
# scripts/calculate_scores.py
"""
Recompute destination x month scores and upsert them into scores_cache.

Reads the collector tables through the configured SignalSource, runs the
composite engine for every destination and month, and writes:

  scores_cache (city_id, month, weather, cost, crowd, buzz, total)
  upsert on (city_id, month)

Default: dry-run (prints a summary, no writes). Use --write to persist.

Usage:
    python -m scripts.calculate_scores
    python -m scripts.calculate_scores --city osaka --write
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from besttiming.catalog.cities import all_destinations, get_destination
from besttiming.config import DataSource, Settings
from besttiming.datasource import build_services
from besttiming.models import MonthlyScore
from besttiming.scoring.composite import ScoreEngine
from besttiming.views import best_month

logger = logging.getLogger(__name__)

TABLE = "scores_cache"


@dataclass
class ScoreRunResult:
    dry_run: bool
    cities: int = 0
    rows: List[Dict[str, Any]] = field(default_factory=list)
    written: int = 0
    errors: int = 0
    best_months: Dict[str, int] = field(default_factory=dict)


def score_row(ms: MonthlyScore) -> Dict[str, Any]:
    return {
        "city_id": ms.destination_id,
        "month": ms.month,
        "weather": ms.scores.weather,
        "cost": ms.scores.cost,
        "crowd": ms.scores.crowd,
        "buzz": ms.scores.buzz,
        "total": ms.scores.total,
    }


def calculate_scores(
    engine: ScoreEngine,
    *,
    supabase: Any = None,
    city_id: Optional[str] = None,
    dry_run: bool = True,
) -> ScoreRunResult:
    result = ScoreRunResult(dry_run=dry_run)

    if city_id:
        destination = get_destination(city_id)
        if destination is None:
            print(f"[scores] city not found: {city_id}")
        destinations = [destination] if destination else []
    else:
        destinations = all_destinations()

    for d in destinations:
        monthly = [engine.score_destination(d, month) for month in range(1, 13)]
        result.cities += 1
        result.rows.extend(score_row(ms) for ms in monthly)
        best = best_month(monthly)
        if best:
            result.best_months[d.id] = best[0]
        print(f"[scores] {d.id}: best month={best[0] if best else None} total={best[1] if best else None}")

    if dry_run or not result.rows:
        return result

    if supabase is None:
        raise RuntimeError("--write needs a live Supabase client (BEST_TIMING_DATA_SOURCE=live).")

    try:
        supabase.table(TABLE).upsert(result.rows, on_conflict="city_id,month").execute()
        result.written = len(result.rows)
    except Exception as e:
        result.errors += 1
        print(f"[scores] UPSERT_ERROR {type(e).__name__}: {e}")

    return result


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute monthly scores into scores_cache.")
    parser.add_argument("--city", default=None, help="Limit to one city id (optional).")
    parser.add_argument(
        "--write",
        action="store_true",
        help="Write to DB. Default is dry-run.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = Settings.from_env()
    if args.write and settings.data_source is not DataSource.LIVE:
        print("[scores] ERROR --write requires BEST_TIMING_DATA_SOURCE=live")
        return 1

    services = build_services(settings)
    result = calculate_scores(
        services.scores,
        supabase=services.supabase,
        city_id=args.city,
        dry_run=not args.write,
    )

    # grep '[calculate_scores][summary]'
    print(
        f"[calculate_scores][summary]"
        f" data_source={settings.data_source.value}"
        f" dry_run={result.dry_run}"
        f" cities={result.cities}"
        f" rows={len(result.rows)}"
        f" written={result.written}"
        f" errors={result.errors}"
    )
    return 0 if result.errors == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
