from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

import requests

from cropdoc.config import settings
from cropdoc.core.schemas import WeatherReading
from cropdoc.errors import WeatherUnavailable


logger = logging.getLogger(__name__)


def validate_coordinates(latitude: Any, longitude: Any) -> bool:
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        return False
    if not isinstance(latitude, (int, float)) or not isinstance(longitude, (int, float)):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def _condition(item: dict[str, Any]) -> str | None:
    weather = item.get("weather") or []
    if weather and isinstance(weather[0], dict):
        return weather[0].get("main")
    return None


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class OpenWeatherClient:
    """
    OpenWeather provider (metric units).

    - Current conditions: /data/2.5/weather
    - 5 day / 3 hour forecast: /data/2.5/forecast

    Retries with a backoff that grows per attempt, then raises WeatherUnavailable.
    """

    base_url = "https://api.openweathermap.org/data/2.5"

    def __init__(
        self,
        api_key: str | None = None,
        timeout_s: float | None = None,
        retries: int | None = None,
        backoff_s: float | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.openweather_api_key
        self.timeout = timeout_s if timeout_s is not None else settings.weather_timeout_s
        self.retries = retries if retries is not None else settings.weather_retries
        self.backoff = backoff_s if backoff_s is not None else settings.weather_backoff_s
        self.headers = {"User-Agent": "CropDoc/1.0"}

    # ------------------------------------------------------------------
    # Internal HTTP helper
    # ------------------------------------------------------------------
    def _get(self, path: str, latitude: float, longitude: float) -> dict[str, Any]:
        if not self.api_key:
            raise WeatherUnavailable("OpenWeather API key not configured")

        params = {"lat": latitude, "lon": longitude, "appid": self.api_key, "units": "metric"}
        attempts = max(1, self.retries)
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                response = requests.get(
                    f"{self.base_url}/{path}",
                    params=params,
                    headers=self.headers,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return response.json()

            except (requests.RequestException, ValueError) as exc:
                last_exc = exc
                logger.warning(
                    "Weather request failed (%s/%s): %s",
                    attempt,
                    attempts,
                    exc,
                )
                if attempt < attempts:
                    time.sleep(self.backoff * attempt)

        raise WeatherUnavailable("Weather API request failed after retries") from last_exc

    # ------------------------------------------------------------------
    # Current conditions
    # ------------------------------------------------------------------
    def current_weather(self, latitude: float, longitude: float) -> WeatherReading:
        data = self._get("weather", latitude, longitude)

        try:
            main = data["main"]
            reading = WeatherReading(
                temperature=float(main["temp"]),
                humidity=float(main["humidity"]),
                wind_speed=(data.get("wind") or {}).get("speed"),
                condition=_condition(data),
                pressure=main.get("pressure"),
                location=data.get("name"),
                timestamp=_timestamp(data.get("dt")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise WeatherUnavailable(f"Malformed weather response: {exc}") from exc

        logger.debug(
            "Current weather lat=%s lon=%s → temp=%s humidity=%s condition=%s",
            latitude,
            longitude,
            reading.temperature,
            reading.humidity,
            reading.condition,
        )
        return reading

    # ------------------------------------------------------------------
    # Forecast
    # ------------------------------------------------------------------
    def forecast(self, latitude: float, longitude: float) -> list[WeatherReading]:
        data = self._get("forecast", latitude, longitude)

        readings: list[WeatherReading] = []
        try:
            city = (data.get("city") or {}).get("name")
            for item in data.get("list") or []:
                main = item["main"]
                pop = item.get("pop")
                readings.append(
                    WeatherReading(
                        temperature=float(main["temp"]),
                        humidity=float(main["humidity"]),
                        wind_speed=(item.get("wind") or {}).get("speed"),
                        condition=_condition(item),
                        precipitation_probability=pop * 100 if pop is not None else None,
                        pressure=main.get("pressure"),
                        location=city,
                        timestamp=_timestamp(item.get("dt")),
                    )
                )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise WeatherUnavailable(f"Malformed forecast response: {exc}") from exc

        logger.debug(
            "Forecast lat=%s lon=%s → %s entries",
            latitude,
            longitude,
            len(readings),
        )
        return readings
