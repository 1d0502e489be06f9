from __future__ import annotations

import logging

from cropdoc.core.policies import AlertPolicy
from cropdoc.core.schemas import WeatherReading
from cropdoc.errors import WeatherUnavailable
from cropdoc.weather import OpenWeatherClient


logger = logging.getLogger(__name__)


class WeatherService:
    """Never raises: current conditions degrade to a fixed reading, forecasts to []."""

    def __init__(self, client: OpenWeatherClient, policy: AlertPolicy | None = None):
        self.client = client
        self.policy = policy or AlertPolicy()

    def fallback_reading(self) -> WeatherReading:
        return WeatherReading(
            temperature=self.policy.default_temperature,
            humidity=self.policy.default_humidity,
            condition=self.policy.default_condition,
            location="Unknown",
            source="fallback",
        )

    def current(self, latitude: float, longitude: float) -> WeatherReading:
        try:
            return self.client.current_weather(latitude, longitude)
        except WeatherUnavailable as exc:
            logger.warning("Current weather unavailable, using fallback reading: %s", exc)
            return self.fallback_reading()

    def forecast(self, latitude: float, longitude: float) -> list[WeatherReading]:
        try:
            return self.client.forecast(latitude, longitude)
        except WeatherUnavailable as exc:
            logger.warning("Forecast unavailable, skipping forecast analysis: %s", exc)
            return []
