# tests/test_config.py
"""Settings.from_env and service wiring for both data sources."""
from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from besttiming.config import DEFAULT_FORECAST_API_URL, DataSource, Settings
from besttiming.datasource import build_services
from besttiming.db.forecast_cache import MemoryForecastCache, SupabaseForecastCache
from besttiming.db.signals import SupabaseSignals
from besttiming.db.supabase_client import get_supabase_client
from besttiming.signals import FixtureSignals

ENV_VARS = (
    "BEST_TIMING_DATA_SOURCE",
    "SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_ANON_KEY",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "FORECAST_API_URL",
    "FORECAST_TIMEOUT_S",
    "FORECAST_DAYS",
    "FORECAST_CACHE_TTL_HOURS",
    "TODAY_BEST_WORKERS",
    "HOME_COUNTRY_CODE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsFromEnv:

    def test_defaults_to_fixture(self, clean_env):
        s = Settings.from_env(load_env_file=False)
        assert s.data_source is DataSource.FIXTURE
        assert s.forecast_api_url == DEFAULT_FORECAST_API_URL
        assert s.forecast_days == 14
        assert s.forecast_cache_ttl_hours == 6.0
        assert s.home_country_code == "KR"

    def test_live_when_supabase_configured(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "https://x.supabase.co")
        clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "secret")
        s = Settings.from_env(load_env_file=False)
        assert s.data_source is DataSource.LIVE
        assert s.supabase_key == "secret"

    def test_public_fallback_names(self, clean_env):
        clean_env.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://x.supabase.co")
        clean_env.setenv("NEXT_PUBLIC_SUPABASE_ANON_KEY", "anon")
        s = Settings.from_env(load_env_file=False)
        assert s.supabase_url == "https://x.supabase.co"
        assert s.supabase_key == "anon"

    def test_live_missing_key_fails_fast(self, clean_env):
        clean_env.setenv("SUPABASE_URL", "https://x.supabase.co")
        with pytest.raises(EnvironmentError, match="SUPABASE_SERVICE_ROLE_KEY"):
            Settings.from_env(load_env_file=False)

    def test_explicit_live_without_url(self, clean_env):
        clean_env.setenv("BEST_TIMING_DATA_SOURCE", "live")
        with pytest.raises(EnvironmentError, match="SUPABASE_URL"):
            Settings.from_env(load_env_file=False)

    def test_explicit_fixture_wins(self, clean_env):
        clean_env.setenv("BEST_TIMING_DATA_SOURCE", "FIXTURE")
        clean_env.setenv("SUPABASE_URL", "https://x.supabase.co")
        assert Settings.from_env(load_env_file=False).data_source is DataSource.FIXTURE

    def test_unknown_data_source(self, clean_env):
        clean_env.setenv("BEST_TIMING_DATA_SOURCE", "mock")
        with pytest.raises(EnvironmentError):
            Settings.from_env(load_env_file=False)

    def test_numeric_overrides(self, clean_env):
        clean_env.setenv("FORECAST_CACHE_TTL_HOURS", "2")
        clean_env.setenv("TODAY_BEST_WORKERS", "4")
        clean_env.setenv("HOME_COUNTRY_CODE", "jp")
        s = Settings.from_env(load_env_file=False)
        assert s.forecast_cache_ttl_hours == 2.0
        assert s.today_best_workers == 4
        assert s.home_country_code == "JP"

    def test_bad_number(self, clean_env):
        clean_env.setenv("FORECAST_DAYS", "two weeks")
        with pytest.raises(EnvironmentError, match="FORECAST_DAYS"):
            Settings.from_env(load_env_file=False)


class TestBuildServices:

    def test_fixture_wiring(self):
        services = build_services(Settings(data_source=DataSource.FIXTURE), provider=MagicMock())
        assert isinstance(services.signals, FixtureSignals)
        assert isinstance(services.forecast.cache, MemoryForecastCache)
        assert services.supabase is None
        assert services.forecast.ttl == timedelta(hours=6)
        assert services.scores.signals is services.signals
        assert services.today_best.forecast is services.forecast

    def test_live_wiring(self):
        sb = MagicMock()
        settings = Settings(
            data_source=DataSource.LIVE,
            supabase_url="https://x.supabase.co",
            supabase_key="secret",
            forecast_cache_ttl_hours=1.5,
            today_best_workers=3,
        )
        services = build_services(settings, supabase=sb, provider=MagicMock())

        assert isinstance(services.signals, SupabaseSignals)
        assert isinstance(services.forecast.cache, SupabaseForecastCache)
        assert services.supabase is sb
        assert services.forecast.ttl == timedelta(hours=1.5)
        assert services.today_best.workers == 3
        # signal tables are read lazily
        sb.table.assert_not_called()

    def test_client_requires_credentials(self):
        with pytest.raises(RuntimeError):
            get_supabase_client(Settings(data_source=DataSource.LIVE))
