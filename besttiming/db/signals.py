# besttiming/db/signals.py
"""
Live SignalSource backed by the tables the collection jobs fill:

  exchange_rates   (currency, rate_date, rate)
  holidays         (country_code, holiday_date)
  buzz_monthly     (city_id, month, year, total_count)
  weather_monthly  (city_id, month, sunny_ratio)

Each table is read page by page once per instance and indexed in memory.
refresh() drops the snapshot; the today-best ranking calls it on every
pass, so long-lived processes pick up new collector runs daily. A failed read
is logged and treated as "no data", so scores fall back to their neutral
defaults instead of failing the whole request.
"""
from __future__ import annotations

import logging
import threading
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from ..signals import RatePoint, SignalSource

logger = logging.getLogger(__name__)

RATE_LOOKBACK_DAYS = 400
PAGE_SIZE = 1000


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


class SupabaseSignals(SignalSource):
    def __init__(self, supabase: Client, *, today: Optional[date] = None) -> None:
        self.supabase = supabase
        self._today = today
        self._lock = threading.Lock()
        self.refresh()

    def refresh(self) -> None:
        """Drop cached tables; the next read reloads them."""
        with self._lock:
            self._rates: Optional[Dict[str, List[RatePoint]]] = None
            self._holidays: Optional[Dict[Tuple[str, int], int]] = None
            self._buzz: Optional[Dict[str, Dict[int, int]]] = None
            self._clear: Optional[Dict[Tuple[str, int], float]] = None

    def _select(
        self,
        table: str,
        columns: str,
        *,
        order: Optional[str] = None,
        **filters: Any,
    ) -> List[dict]:
        # Paginate: the API caps every response (1000 rows by default)
        rows: List[dict] = []
        offset = 0
        while True:
            try:
                q = self.supabase.table(table).select(columns)
                for col, value in filters.items():
                    q = q.gte(col, value)
                if order:
                    q = q.order(order, desc=True)
                resp = q.range(offset, offset + PAGE_SIZE - 1).execute()
            except Exception as exc:
                logger.warning(
                    "[signals] %s read failed at offset=%d: %s: %s",
                    table, offset, type(exc).__name__, exc,
                )
                return []

            batch = list(getattr(resp, "data", None) or [])
            if not batch:
                break
            rows.extend(batch)
            # Advance by what came back; the server cap may be below PAGE_SIZE
            offset += len(batch)

        logger.info("[signals] %s rows=%d", table, len(rows))
        return rows

    # -- exchange_rates ----------------------------------------------------

    def _load_rates(self) -> Dict[str, List[RatePoint]]:
        with self._lock:
            if self._rates is not None:
                return self._rates
            since = (self._today or date.today()) - timedelta(days=RATE_LOOKBACK_DAYS)
            grouped: Dict[str, List[RatePoint]] = {}
            for row in self._select("exchange_rates", "currency, rate_date, rate", order="rate_date", rate_date=since.isoformat()):
                d = _parse_date(row.get("rate_date"))
                rate = row.get("rate")
                currency = str(row.get("currency") or "").upper()
                if d is None or rate is None or not currency:
                    continue
                grouped.setdefault(currency, []).append(RatePoint(rate_date=d, rate=float(rate)))
            for rows in grouped.values():
                rows.sort(key=lambda r: r.rate_date, reverse=True)
            self._rates = grouped
            return self._rates

    def rate_history(self, currency: str) -> List[RatePoint]:
        return list(self._load_rates().get((currency or "").upper(), []))

    # -- holidays ----------------------------------------------------------

    def _load_holidays(self) -> Dict[Tuple[str, int], int]:
        with self._lock:
            if self._holidays is not None:
                return self._holidays
            counts: Dict[Tuple[str, int], int] = {}
            for row in self._select("holidays", "country_code, holiday_date"):
                d = _parse_date(row.get("holiday_date"))
                cc = str(row.get("country_code") or "").upper()
                if d is None or not cc:
                    continue
                counts[(cc, d.month)] = counts.get((cc, d.month), 0) + 1
            self._holidays = counts
            return self._holidays

    def holiday_count(self, country_code: str, month: int) -> int:
        return self._load_holidays().get(((country_code or "").upper(), month), 0)

    # -- buzz_monthly ------------------------------------------------------

    def _load_buzz(self) -> Dict[str, Dict[int, int]]:
        with self._lock:
            if self._buzz is not None:
                return self._buzz
            # Latest year wins per (city, month)
            latest: Dict[Tuple[str, int], Tuple[int, Optional[int]]] = {}
            for row in self._select("buzz_monthly", "city_id, month, year, total_count"):
                city_id = row.get("city_id")
                month = row.get("month")
                year = row.get("year") or 0
                if not city_id or not month:
                    continue
                key = (str(city_id), int(month))
                existing = latest.get(key)
                if existing is None or int(year) > existing[0]:
                    latest[key] = (int(year), row.get("total_count"))

            by_city: Dict[str, Dict[int, int]] = {}
            for (city_id, month), (_, count) in latest.items():
                if count is not None:
                    by_city.setdefault(city_id, {})[month] = int(count)
            self._buzz = by_city
            return self._buzz

    def buzz_counts(self, destination_id: str) -> Dict[int, int]:
        return dict(self._load_buzz().get(destination_id, {}))

    # -- weather_monthly ---------------------------------------------------

    def _load_clear_ratios(self) -> Dict[Tuple[str, int], float]:
        with self._lock:
            if self._clear is not None:
                return self._clear
            ratios: Dict[Tuple[str, int], float] = {}
            for row in self._select("weather_monthly", "city_id, month, sunny_ratio"):
                ratio = row.get("sunny_ratio")
                if row.get("city_id") and row.get("month") and isinstance(ratio, (int, float)):
                    ratios[(str(row["city_id"]), int(row["month"]))] = float(ratio)
            self._clear = ratios
            return self._clear

    def historical_clear_ratio(self, destination_id: str, month: int) -> Optional[float]:
        return self._load_clear_ratios().get((destination_id, month))
