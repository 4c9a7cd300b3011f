#!/usr/bin/env python3
# scripts/best_timing_cli.py
"""
Best-timing CLI: monthly scores, month rankings, forecasts, today's best.

Usage:
    python -m scripts.best_timing_cli cities [query]
    python -m scripts.best_timing_cli scores osaka
    python -m scripts.best_timing_cli ranking 4
    python -m scripts.best_timing_cli forecast tokyo
    python -m scripts.best_timing_cli today [--date 2026-03-01]

Data source: BEST_TIMING_DATA_SOURCE=live|fixture (default: live when
SUPABASE_URL is set). Output is JSON with camelCase keys.

Exit codes: 0 ok, 1 not found / invalid argument, 2 upstream unavailable.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime, timezone
from typing import Any, Optional

from besttiming.catalog.cities import get_destination, search
from besttiming.config import Settings
from besttiming.datasource import Services, build_services
from besttiming.errors import InvalidArgumentError, UpstreamUnavailableError
from besttiming.forecast.service import comparison_text
from besttiming.scoring.composite import score_grade
from besttiming.views import best_month


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _error(message: str) -> None:
    print(f"[best_timing] ERROR {message}", file=sys.stderr)


def cmd_cities(services: Services, args: argparse.Namespace) -> int:
    _emit({"cities": [d.to_json_dict() for d in search(args.query)]})
    return 0


def cmd_scores(services: Services, args: argparse.Namespace) -> int:
    destination = get_destination(args.city_id)
    scores = services.views.scores_for_destination(args.city_id)
    if destination is None or scores is None:
        _error(f"City not found: {args.city_id}")
        return 1

    best = best_month(scores)
    today = args.today or date.today()
    current = next((s for s in scores if s.month == today.month), None)
    _emit(
        {
            "city": destination.to_json_dict(),
            "scores": [
                {**s.to_json_dict(), "grade": score_grade(s.scores.total)}
                for s in scores
            ],
            "bestMonth": {"month": best[0], "score": best[1]} if best else None,
            "currentMonth": {
                "month": today.month,
                "score": current.scores.total if current else 0,
            },
        }
    )
    return 0


def cmd_ranking(services: Services, args: argparse.Namespace) -> int:
    rankings = services.views.ranking_for_month(args.month)
    _emit({"month": args.month, "rankings": [r.to_json_dict() for r in rankings]})
    return 0


def cmd_forecast(services: Services, args: argparse.Namespace) -> int:
    destination = get_destination(args.city_id)
    if destination is None:
        _error(f"City not found: {args.city_id}")
        return 1

    summary = services.forecast.get_forecast(destination.id, destination.latitude, destination.longitude)
    _emit({**summary.to_json_dict(), "comparisonText": comparison_text(summary)})
    return 0


def cmd_today(services: Services, args: argparse.Namespace) -> int:
    today = args.date or date.today()
    rankings = services.today_best.rank_today(today)
    _emit(
        {
            "date": today.isoformat(),
            "rankings": [r.to_json_dict() for r in rankings],
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }
    )
    return 0


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Best travel timing: scores, rankings and forecasts.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("cities", help="List or search destinations.")
    p.add_argument("query", nargs="?", default=None)
    p.set_defaults(func=cmd_cities)

    p = sub.add_parser("scores", help="12 monthly scores for one destination (where -> when).")
    p.add_argument("city_id")
    p.add_argument("--today", type=_iso_date, default=None, help="Override today's date (YYYY-MM-DD).")
    p.set_defaults(func=cmd_scores)

    p = sub.add_parser("ranking", help="All destinations ranked for one month (when -> where).")
    p.add_argument("month", type=int)
    p.set_defaults(func=cmd_ranking)

    p = sub.add_parser("forecast", help="14-day forecast vs historical clear-day ratio.")
    p.add_argument("city_id")
    p.set_defaults(func=cmd_forecast)

    p = sub.add_parser("today", help="Today's best timing Top 10.")
    p.add_argument("--date", type=_iso_date, default=None, help="Ranking date (YYYY-MM-DD).")
    p.set_defaults(func=cmd_today)

    return parser


def main(argv: Optional[list[str]] = None, *, services: Optional[Services] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        services = services or build_services(Settings.from_env())
        return args.func(services, args)
    except InvalidArgumentError as e:
        _error(str(e))
        return 1
    except UpstreamUnavailableError as e:
        _error(f"Failed to fetch forecast: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
