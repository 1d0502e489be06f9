from __future__ import annotations

import logging
from typing import Any

import requests

from cropdoc.config import Settings
from cropdoc.core.schemas import AlternativePrediction, PredictionMethod, PredictionResult, WeatherReading
from cropdoc.errors import ModelUnavailable


logger = logging.getLogger(__name__)

PLACEHOLDER_URLS = ("", "undefined", "none", "null")


def is_configured(base_url: str | None) -> bool:
    return base_url is not None and base_url.strip().lower() not in PLACEHOLDER_URLS


def _confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ModelUnavailable(f"Malformed confidence from model: {value!r}")
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ModelUnavailable(f"Model confidence out of range: {value}")
    return value


def parse_prediction(body: Any, max_alternatives: int = 3) -> PredictionResult:
    """Turn a `{diseaseName, confidence, alternativePredictions?}` body into a result."""
    if not isinstance(body, dict):
        raise ModelUnavailable("Model response is not a JSON object")

    name = body.get("diseaseName")
    if not isinstance(name, str) or not name.strip():
        raise ModelUnavailable("Model response has no diseaseName")
    confidence = _confidence(body.get("confidence"))

    raw_alternatives = body.get("alternativePredictions")
    if raw_alternatives is None:
        raw_alternatives = []
    if not isinstance(raw_alternatives, list):
        raise ModelUnavailable("alternativePredictions is not a list")

    alternatives: list[AlternativePrediction] = []
    for item in raw_alternatives:
        if not isinstance(item, dict) or not isinstance(item.get("diseaseName"), str):
            logger.warning("Dropping malformed alternative prediction: %r", item)
            continue
        try:
            alt_conf = _confidence(item.get("confidence"))
        except ModelUnavailable as exc:
            logger.warning("Dropping alternative %r: %s", item["diseaseName"], exc)
            continue
        if alt_conf > confidence:
            logger.warning("Dropping alternative %r above primary confidence", item["diseaseName"])
            continue
        alternatives.append(AlternativePrediction(disease_name=item["diseaseName"], confidence=alt_conf))

    alternatives.sort(key=lambda a: a.confidence, reverse=True)

    return PredictionResult(
        disease_name=name.strip(),
        confidence=confidence,
        alternatives=alternatives[:max_alternatives],
        method=PredictionMethod.EXTERNAL_MODEL,
    )


class ExternalModelClient:
    """Opaque remote disease model: POST {base_url}/predict."""

    def __init__(self, base_url: str, timeout_s: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_s

    @classmethod
    def from_settings(cls, settings: Settings) -> ExternalModelClient | None:
        if not is_configured(settings.ai_model_base_url):
            return None
        return cls(settings.ai_model_base_url.strip(), timeout_s=settings.ai_model_timeout_s)

    def predict(
        self,
        crop_type: str,
        image_url: str | None = None,
        weather: WeatherReading | None = None,
        environmental_data: dict[str, Any] | None = None,
    ) -> PredictionResult:
        payload: dict[str, Any] = {"imageUrl": image_url, "cropType": crop_type}
        if weather is not None:
            payload["weatherData"] = weather.to_dict()
        if environmental_data:
            payload["environmentalData"] = environmental_data

        try:
            response = requests.post(
                f"{self.base_url}/predict",
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise ModelUnavailable(f"Model request failed: {exc}") from exc

        return parse_prediction(body)
