# besttiming/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dotenv import load_dotenv


class DataSource(str, Enum):
    LIVE = "live"
    FIXTURE = "fixture"


DEFAULT_FORECAST_API_URL = "https://api.open-meteo.com/v1/forecast"


def _env(*names: str) -> Optional[str]:
    for name in names:
        v = (os.getenv(name) or "").strip()
        if v:
            return v
    return None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise EnvironmentError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise EnvironmentError(f"{name} must be a number, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    data_source: DataSource
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    forecast_api_url: str = DEFAULT_FORECAST_API_URL
    forecast_timeout_s: float = 10.0
    forecast_days: int = 14
    forecast_cache_ttl_hours: float = 6.0
    today_best_workers: int = 8
    home_country_code: str = "KR"

    @classmethod
    def from_env(cls, *, load_env_file: bool = True) -> "Settings":
        """
        Resolve settings once at process start.

        BEST_TIMING_DATA_SOURCE=live|fixture picks the variant explicitly.
        Unset: live when SUPABASE_URL is configured, fixture otherwise.
        """
        if load_env_file:
            load_dotenv()

        url = _env("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
        key = _env(
            "SUPABASE_SERVICE_ROLE_KEY",
            "SUPABASE_ANON_KEY",
            "NEXT_PUBLIC_SUPABASE_ANON_KEY",
        )

        requested = (_env("BEST_TIMING_DATA_SOURCE") or "").lower()
        if requested:
            try:
                data_source = DataSource(requested)
            except ValueError as e:
                raise EnvironmentError(
                    f"BEST_TIMING_DATA_SOURCE must be 'live' or 'fixture', got {requested!r}"
                ) from e
        else:
            data_source = DataSource.LIVE if url else DataSource.FIXTURE

        # Fail fast if live mode is missing credentials
        if data_source is DataSource.LIVE:
            missing = []
            if not url:
                missing.append("SUPABASE_URL")
            if not key:
                missing.append("SUPABASE_SERVICE_ROLE_KEY")
            if missing:
                raise EnvironmentError(
                    f"Missing required environment variables: {', '.join(missing)}. "
                    "Copy .env.example to .env and fill in your Supabase credentials, "
                    "or set BEST_TIMING_DATA_SOURCE=fixture."
                )

        return cls(
            data_source=data_source,
            supabase_url=url,
            supabase_key=key,
            forecast_api_url=_env("FORECAST_API_URL") or DEFAULT_FORECAST_API_URL,
            forecast_timeout_s=_env_float("FORECAST_TIMEOUT_S", 10.0),
            forecast_days=_env_int("FORECAST_DAYS", 14),
            forecast_cache_ttl_hours=_env_float("FORECAST_CACHE_TTL_HOURS", 6.0),
            today_best_workers=_env_int("TODAY_BEST_WORKERS", 8),
            home_country_code=(_env("HOME_COUNTRY_CODE") or "KR").upper(),
        )
