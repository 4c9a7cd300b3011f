# besttiming/db/forecast_cache.py
"""
Forecast cache backends.

One entry per destination: the fetched forecast days plus fetched_at.
Writes are single-key upserts (last write wins). Expiry is decided by the
reader (ForecastService), not by the backend.

Supabase table forecast_cache:
  city_id        text primary key
  forecast_data  text (JSON array of ForecastDay, camelCase keys)
  fetched_at     timestamptz
"""
from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError
from supabase import Client

from ..errors import CacheCorruptError
from ..models import ForecastDay

TABLE = "forecast_cache"


@dataclass(frozen=True)
class CachedForecast:
    days: List[ForecastDay]
    fetched_at: datetime


def encode_days(days: List[ForecastDay]) -> str:
    return json.dumps([d.to_json_dict() for d in days], ensure_ascii=False)


def decode_days(payload: Any) -> List[ForecastDay]:
    """Parse a cached forecast_data payload. Raises CacheCorruptError."""
    try:
        raw = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
        if not isinstance(raw, list):
            raise CacheCorruptError(f"forecast_data is not a list: {type(raw).__name__}")
        return [ForecastDay.model_validate(item) for item in raw]
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise CacheCorruptError(f"Unparseable forecast_data: {e}") from e


def parse_fetched_at(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as e:
            raise CacheCorruptError(f"Unparseable fetched_at: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class ForecastCache(ABC):
    @abstractmethod
    def read(self, destination_id: str) -> Optional[CachedForecast]:
        """Entry for destination_id, None if absent. Raises CacheCorruptError."""

    @abstractmethod
    def write(self, destination_id: str, days: List[ForecastDay], fetched_at: datetime) -> None:
        """Upsert, overwriting any prior entry."""


class MemoryForecastCache(ForecastCache):
    """Process-local cache. Stores the same encoded payload as the table."""

    def __init__(self) -> None:
        self._rows: Dict[str, Tuple[str, str]] = {}
        self._lock = threading.Lock()

    def read(self, destination_id: str) -> Optional[CachedForecast]:
        with self._lock:
            row = self._rows.get(destination_id)
        if row is None:
            return None
        payload, fetched_at = row
        return CachedForecast(days=decode_days(payload), fetched_at=parse_fetched_at(fetched_at))

    def write(self, destination_id: str, days: List[ForecastDay], fetched_at: datetime) -> None:
        row = (encode_days(days), fetched_at.isoformat())
        with self._lock:
            self._rows[destination_id] = row

    def put_raw(self, destination_id: str, payload: str, fetched_at: str) -> None:
        """Store an arbitrary payload (used to simulate corrupt rows)."""
        with self._lock:
            self._rows[destination_id] = (payload, fetched_at)


class SupabaseForecastCache(ForecastCache):
    def __init__(self, supabase: Client) -> None:
        self.supabase = supabase

    def read(self, destination_id: str) -> Optional[CachedForecast]:
        resp = (
            self.supabase.table(TABLE)
            .select("forecast_data, fetched_at")
            .eq("city_id", destination_id)
            .limit(1)
            .execute()
        )
        data = getattr(resp, "data", None) or []
        if not data:
            return None
        row = data[0]
        return CachedForecast(
            days=decode_days(row.get("forecast_data")),
            fetched_at=parse_fetched_at(row.get("fetched_at")),
        )

    def write(self, destination_id: str, days: List[ForecastDay], fetched_at: datetime) -> None:
        (
            self.supabase.table(TABLE)
            .upsert(
                {
                    "city_id": destination_id,
                    "forecast_data": encode_days(days),
                    "fetched_at": fetched_at.isoformat(),
                },
                on_conflict="city_id",
            )
            .execute()
        )
