from __future__ import annotations

import logging
from typing import Any

from cropdoc.config import Settings, settings
from cropdoc.core.alerts import AlertComposer
from cropdoc.core.pipeline import PredictionPipeline
from cropdoc.core.policies import Policies
from cropdoc.core.risk import WeatherRiskAnalyzer
from cropdoc.core.schemas import AlertReport, PredictionResult, RiskAssessment, WeatherReading
from cropdoc.services.knowledge_service import DiseaseStore, KnowledgeService, TableDiseaseStore
from cropdoc.services.model_service import ExternalModelClient
from cropdoc.services.weather_service import WeatherService
from cropdoc.weather import OpenWeatherClient, validate_coordinates

logger = logging.getLogger(__name__)

WeatherInput = WeatherReading | dict[str, Any] | None


def _reading(weather: WeatherInput) -> WeatherReading | None:
    if weather is None or isinstance(weather, WeatherReading):
        return weather
    return WeatherReading.from_dict(weather)


def _safe_reading(weather: Any) -> WeatherReading | None:
    """Like `_reading`, but an unparsable input becomes None instead of raising."""
    try:
        return _reading(weather)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Ignoring unusable weather reading: %s", exc)
        return None


def predict(
    crop_type: str,
    weather: WeatherInput = None,
    model: ExternalModelClient | None = None,
    store: DiseaseStore | None = None,
) -> PredictionResult:
    pipeline = PredictionPipeline(knowledge=KnowledgeService(store), policies=Policies(), model=model)
    return pipeline.predict(crop_type, weather=_reading(weather))


def analyze_weather_risk(weather: WeatherReading | dict[str, Any]) -> RiskAssessment:
    return WeatherRiskAnalyzer().analyze(_reading(weather))


def agriculture_alerts(
    current_weather: WeatherInput,
    forecast: list[WeatherInput] | None,
    crop_type: str = "general",
) -> AlertReport:
    readings: list[WeatherReading] = []
    for entry in forecast or []:
        reading = _safe_reading(entry)
        if reading is None:
            logger.warning("Dropping unusable forecast entry: %r", entry)
            continue
        readings.append(reading)
    return AlertComposer().compose(_safe_reading(current_weather), readings, crop_type)


class CropDoctor:
    def __init__(
        self,
        config: Settings | None = None,
        store: DiseaseStore | None = None,
        model: ExternalModelClient | None = None,
        weather_client: OpenWeatherClient | None = None,
    ):
        config = config or settings
        policies = Policies()

        if store is None and config.disease_data_path:
            store = TableDiseaseStore.from_path(config.disease_data_path)
        if model is None:
            model = ExternalModelClient.from_settings(config)

        self.knowledge = KnowledgeService(store)
        self.pipeline = PredictionPipeline(knowledge=self.knowledge, policies=policies, model=model)
        self.analyzer = WeatherRiskAnalyzer(policy=policies.risk)
        self.alerts = AlertComposer(analyzer=self.analyzer, policy=policies.alerts)
        self.weather = WeatherService(
            client=weather_client or OpenWeatherClient(
                api_key=config.openweather_api_key,
                timeout_s=config.weather_timeout_s,
                retries=config.weather_retries,
                backoff_s=config.weather_backoff_s,
            ),
            policy=policies.alerts,
        )

        logger.info(
            "✅ CropDoctor initialized (external model: %s)",
            "configured" if model is not None else "not configured",
        )

    def predict(
        self,
        crop_type: str,
        weather: WeatherInput = None,
        image_url: str | None = None,
        environmental_data: dict[str, Any] | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> dict[str, Any]:
        reading = _reading(weather)
        if reading is None and validate_coordinates(latitude, longitude):
            reading = self.weather.current(latitude, longitude)

        result = self.pipeline.predict(
            crop_type,
            weather=reading,
            image_url=image_url,
            environmental_data=environmental_data,
        )

        payload = result.to_dict()
        payload["imageUrl"] = image_url
        return payload

    def analyze_weather_risk(self, weather: WeatherReading | dict[str, Any]) -> dict[str, Any]:
        return self.analyzer.analyze(_reading(weather)).to_dict()

    def current_weather(self, latitude: float, longitude: float) -> dict[str, Any]:
        return self.weather.current(latitude, longitude).to_dict()

    def forecast(self, latitude: float, longitude: float) -> dict[str, Any]:
        readings = self.weather.forecast(latitude, longitude)
        return {
            "forecast": [r.to_dict() for r in readings],
            "dataSource": "live" if readings else "fallback",
        }

    def agriculture_alerts(self, latitude: float, longitude: float, crop_type: str = "general") -> dict[str, Any]:
        current = self.weather.current(latitude, longitude)
        forecast = self.weather.forecast(latitude, longitude)
        return self.alerts.compose(current, forecast, crop_type).to_dict()
