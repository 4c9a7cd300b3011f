# besttiming/datasource.py
"""
Service wiring for the two data-source variants, chosen once at startup:

  LIVE     Supabase signal tables + Supabase forecast_cache + Open-Meteo
  FIXTURE  in-memory fixture signals + in-memory cache + Open-Meteo

Everything downstream receives its collaborators through here; nothing
reads credentials or builds clients on its own.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from .config import DataSource, Settings
from .db.forecast_cache import ForecastCache, MemoryForecastCache, SupabaseForecastCache
from .db.signals import SupabaseSignals
from .db.supabase_client import get_supabase_client
from .forecast.provider import OpenMeteoProvider
from .forecast.service import ForecastService
from .scoring.composite import ScoreEngine
from .signals import FixtureSignals, SignalSource
from .today_best import TodayBestEngine
from .views import MonthlyViews

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    data_source: DataSource
    signals: SignalSource
    scores: ScoreEngine
    views: MonthlyViews
    forecast: ForecastService
    today_best: TodayBestEngine
    supabase: Optional[Any] = None


def build_services(
    settings: Settings,
    *,
    supabase: Optional[Any] = None,
    provider: Optional[OpenMeteoProvider] = None,
) -> Services:
    signals: SignalSource
    cache: ForecastCache

    if settings.data_source is DataSource.LIVE:
        supabase = supabase or get_supabase_client(settings)
        signals = SupabaseSignals(supabase)
        cache = SupabaseForecastCache(supabase)
    else:
        supabase = None
        signals = FixtureSignals.default()
        cache = MemoryForecastCache()

    logger.info("[services] data_source=%s", settings.data_source.value)

    engine = ScoreEngine(signals, home_country_code=settings.home_country_code)
    forecast = ForecastService(
        provider or OpenMeteoProvider(
            base_url=settings.forecast_api_url,
            timeout_s=settings.forecast_timeout_s,
        ),
        cache,
        signals,
        ttl=timedelta(hours=settings.forecast_cache_ttl_hours),
        forecast_days=settings.forecast_days,
    )

    return Services(
        data_source=settings.data_source,
        signals=signals,
        scores=engine,
        views=MonthlyViews(engine),
        forecast=forecast,
        today_best=TodayBestEngine(engine, forecast, workers=settings.today_best_workers),
        supabase=supabase,
    )
