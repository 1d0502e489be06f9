from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


CROP_TYPES = ("rice", "wheat", "corn", "tomato", "potato", "cotton", "sugarcane", "soybean", "other")
SEVERITIES = ("low", "medium", "high", "critical")


def normalize_crop(crop_type: str | None) -> str:
    return str(crop_type or "").strip().lower()


class PredictionMethod(str, Enum):
    EXTERNAL_MODEL = "external_model"
    RULE_BASED = "enhanced_rule_based"
    FALLBACK = "fallback"


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


@dataclass(frozen=True)
class WeatherReading:
    temperature: float                       # °C
    humidity: float                          # %, 0-100
    wind_speed: float | None = None
    condition: str | None = None             # e.g. "Clear", "Rain"
    precipitation_probability: float | None = None  # %
    pressure: float | None = None
    location: str | None = None
    timestamp: datetime | None = None
    source: str = "live"                     # "live" | "fallback"

    @property
    def condition_text(self) -> str:
        return self.condition or ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WeatherReading:
        """
        Accepts snake_case or the camelCase/nested shape the weather routes emit:
        {"temperature": 18 | {"current": 18}, "humidity": 90,
         "weather": {"main": "Rain"}, "windSpeed": 3.1,
         "precipitation": {"probability": 80}}
        """
        temperature = data.get("temperature")
        if isinstance(temperature, dict):
            temperature = temperature.get("current")
        humidity = data.get("humidity")
        if temperature is None or humidity is None:
            raise ValueError("weather reading requires temperature and humidity")

        condition = _first(data, "condition", "weather")
        if isinstance(condition, dict):
            condition = condition.get("main")

        precipitation = _first(data, "precipitation_probability", "precipitationProbability")
        if precipitation is None and isinstance(data.get("precipitation"), dict):
            precipitation = data["precipitation"].get("probability")

        location = data.get("location")
        if isinstance(location, dict):
            location = location.get("name")

        return cls(
            temperature=float(temperature),
            humidity=float(humidity),
            wind_speed=_optional_float(_first(data, "wind_speed", "windSpeed")),
            condition=str(condition) if condition is not None else None,
            precipitation_probability=_optional_float(precipitation),
            pressure=_optional_float(data.get("pressure")),
            location=location,
            source=str(data.get("source") or "live"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "temperature": self.temperature,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "condition": self.condition,
            "precipitationProbability": self.precipitation_probability,
            "pressure": self.pressure,
            "location": self.location,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "source": self.source,
        }


@dataclass(frozen=True)
class DiseaseRecord:
    name: str
    crop_type: str
    causes: list[str] = field(default_factory=list)       # free-text tags: "fungal", "cool", ...
    symptoms: list[str] = field(default_factory=list)
    treatments: list[str] = field(default_factory=list)
    severity: str = "medium"                               # low | medium | high | critical
    prevention: list[str] = field(default_factory=list)
    description: str = ""
    is_active: bool = True

    @property
    def causes_text(self) -> str:
        return " ".join(self.causes).lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cropType": self.crop_type,
            "description": self.description,
            "severity": self.severity,
            "causes": list(self.causes),
            "symptoms": list(self.symptoms),
            "treatments": list(self.treatments),
            "prevention": list(self.prevention),
        }


@dataclass(frozen=True)
class ScoredCandidate:
    name: str
    confidence: float
    factors: list[str]       # ordered: base, weather, season
    severity: str
    symptoms: list[str]
    treatments: list[str]


@dataclass(frozen=True)
class AlternativePrediction:
    disease_name: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {"diseaseName": self.disease_name, "confidence": self.confidence}


@dataclass(frozen=True)
class PredictionResult:
    disease_name: str
    confidence: float
    alternatives: list[AlternativePrediction]
    method: PredictionMethod
    recommendation: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    disease: DiseaseRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "prediction": {
                "diseaseName": self.disease_name,
                "confidence": self.confidence,
                "alternativePredictions": [a.to_dict() for a in self.alternatives],
            },
            "predictionMethod": self.method.value,
            "recommendation": self.recommendation,
            "details": self.details,
            "diseaseDetails": self.disease.to_dict() if self.disease else None,
        }


@dataclass(frozen=True)
class Risk:
    type: str       # "high-humidity", "heat-stress", ..., "optimal"
    level: str      # "low" | "medium" | "high"
    message: str
    conditions: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "level": self.level,
            "message": self.message,
            "conditions": self.conditions,
        }


@dataclass(frozen=True)
class RiskAssessment:
    overall_risk: str   # "low" | "medium" | "high"
    risks: list[Risk]
    recommendations: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallRisk": self.overall_risk,
            "risks": [r.to_dict() for r in self.risks],
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class Alert:
    type: str       # "current-weather" | "forecast-warning"
    severity: str
    title: str
    message: str
    details: Any
    recommendations: list[str]

    def to_dict(self) -> dict[str, Any]:
        details = self.details
        if isinstance(details, list):
            details = [d.to_dict() if isinstance(d, Risk) else d for d in details]
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "details": details,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class AlertReport:
    alerts: list[Alert]
    data_source: str        # "live" | "fallback"
    last_updated: datetime
    location: str | None = None
    error: str | None = None

    @property
    def alert_count(self) -> int:
        return len(self.alerts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "alertCount": self.alert_count,
            "alerts": [a.to_dict() for a in self.alerts],
            "lastUpdated": self.last_updated.isoformat(),
            "dataSource": self.data_source,
            "error": self.error,
        }
