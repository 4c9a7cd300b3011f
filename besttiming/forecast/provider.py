# besttiming/forecast/provider.py
"""
Open-Meteo daily forecast client.

Any transport error, timeout, non-2xx status or malformed payload is raised
as UpstreamUnavailableError. There is no retry at this layer.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config import DEFAULT_FORECAST_API_URL
from ..errors import UpstreamUnavailableError
from ..models import ForecastDay

logger = logging.getLogger(__name__)

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,precipitation_sum,weather_code"

# WMO weather interpretation codes
WEATHER_ICONS: Dict[int, str] = {
    0: "☀️", 1: "🌤️", 2: "⛅", 3: "☁️",
    45: "🌫️", 48: "🌫️",
    51: "🌧️", 53: "🌧️", 55: "🌧️", 56: "🌧️", 57: "🌧️",
    61: "🌧️", 63: "🌧️", 65: "🌧️", 66: "🌧️", 67: "🌧️",
    71: "🌨️", 73: "🌨️", 75: "🌨️", 77: "🌨️",
    80: "🌧️", 81: "🌧️", 82: "🌧️",
    85: "🌨️", 86: "🌨️",
    95: "⛈️", 96: "⛈️", 99: "⛈️",
}
DEFAULT_ICON = "🌤️"


def is_clear_weather(code: int) -> bool:
    """Codes 0-2 (clear, mainly clear, partly cloudy) count as clear days."""
    return 0 <= code <= 2


def weather_icon(code: int) -> str:
    return WEATHER_ICONS.get(code, DEFAULT_ICON)


def make_forecast_day(
    date: str,
    temp_max: float,
    temp_min: float,
    precipitation: Optional[float],
    weather_code: int,
) -> ForecastDay:
    code = int(weather_code)
    return ForecastDay(
        date=date,
        temp_max=temp_max,
        temp_min=temp_min,
        precipitation=precipitation or 0.0,
        weather_code=code,
        weather_icon=weather_icon(code),
        is_clear=is_clear_weather(code),
    )


def parse_daily(payload: Dict[str, Any]) -> List[ForecastDay]:
    daily = payload["daily"]
    times = daily["time"]
    return [
        make_forecast_day(
            times[i],
            daily["temperature_2m_max"][i],
            daily["temperature_2m_min"][i],
            daily["precipitation_sum"][i],
            daily["weather_code"][i],
        )
        for i in range(len(times))
    ]


class OpenMeteoProvider:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_FORECAST_API_URL,
        timeout_s: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def fetch(self, latitude: float, longitude: float, days: int = 14) -> List[ForecastDay]:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": DAILY_FIELDS,
            "forecast_days": days,
            "timezone": "auto",
        }
        try:
            r = self.session.get(self.base_url, params=params, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise UpstreamUnavailableError(f"Forecast API request failed: {type(e).__name__}: {e}") from e

        if not 200 <= r.status_code < 300:
            raise UpstreamUnavailableError(
                f"Forecast API error {r.status_code}: {r.text[:200]}",
                status_code=r.status_code,
            )

        try:
            forecast = parse_daily(r.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamUnavailableError(f"Malformed forecast payload: {e}", status_code=r.status_code) from e

        logger.info("[forecast] fetched lat=%s lon=%s days=%d", latitude, longitude, len(forecast))
        return forecast
