# tests/test_forecast_provider.py
"""Open-Meteo client: parsing, icons, error mapping (mocked session, no network)."""
from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from besttiming.errors import UpstreamUnavailableError
from besttiming.forecast.provider import (
    DEFAULT_ICON,
    OpenMeteoProvider,
    is_clear_weather,
    weather_icon,
)

PAYLOAD = {
    "daily": {
        "time": ["2026-03-01", "2026-03-02"],
        "temperature_2m_max": [20.0, 18.5],
        "temperature_2m_min": [10.0, 9.0],
        "precipitation_sum": [0.0, None],
        "weather_code": [0, 61],
    }
}


def _session(*, status: int = 200, payload=PAYLOAD, json_error: Exception | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = "upstream says no"
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    session = MagicMock()
    session.get.return_value = resp
    return session


class TestWeatherCodes:

    @pytest.mark.parametrize("code,clear", [(0, True), (1, True), (2, True), (3, False), (61, False), (95, False)])
    def test_clear_codes(self, code, clear):
        assert is_clear_weather(code) is clear

    def test_icons(self):
        assert weather_icon(0) == "☀️"
        assert weather_icon(95) == "⛈️"
        assert weather_icon(12345) == DEFAULT_ICON


class TestFetch:

    def test_parses_daily_arrays(self):
        provider = OpenMeteoProvider(session=_session())
        days = provider.fetch(34.69, 135.50)

        assert [d.date for d in days] == [date(2026, 3, 1), date(2026, 3, 2)]
        assert days[0].is_clear is True
        assert days[0].weather_icon == "☀️"
        assert days[1].is_clear is False
        assert days[1].precipitation == 0.0
        assert days[1].temp_max == 18.5

    def test_request_params(self):
        session = _session()
        OpenMeteoProvider(base_url="https://example.test/forecast", timeout_s=3.0, session=session).fetch(1.0, 2.0, days=7)

        args, kwargs = session.get.call_args
        assert args[0] == "https://example.test/forecast"
        assert kwargs["timeout"] == 3.0
        assert kwargs["params"]["latitude"] == 1.0
        assert kwargs["params"]["longitude"] == 2.0
        assert kwargs["params"]["forecast_days"] == 7
        assert "weather_code" in kwargs["params"]["daily"]

    def test_non_2xx(self):
        provider = OpenMeteoProvider(session=_session(status=503))
        with pytest.raises(UpstreamUnavailableError) as exc:
            provider.fetch(1.0, 2.0)
        assert exc.value.status_code == 503

    @pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("slow")])
    def test_transport_errors(self, error):
        session = MagicMock()
        session.get.side_effect = error
        with pytest.raises(UpstreamUnavailableError):
            OpenMeteoProvider(session=session).fetch(1.0, 2.0)

    def test_invalid_json(self):
        provider = OpenMeteoProvider(session=_session(json_error=ValueError("no json")))
        with pytest.raises(UpstreamUnavailableError):
            provider.fetch(1.0, 2.0)

    def test_missing_fields(self):
        provider = OpenMeteoProvider(session=_session(payload={"daily": {"time": ["2026-03-01"]}}))
        with pytest.raises(UpstreamUnavailableError):
            provider.fetch(1.0, 2.0)
