from __future__ import annotations

import logging

from cropdoc.core import catalog
from cropdoc.core.policies import ScoringPolicy
from cropdoc.core.schemas import (
    AlternativePrediction,
    DiseaseRecord,
    ScoredCandidate,
    WeatherReading,
    normalize_crop,
)
from cropdoc.services.knowledge_service import KnowledgeService


logger = logging.getLogger(__name__)


def _pct(value: float) -> str:
    return f"{value * 100:.0f}%"


class DiseaseScorer:
    """
    Rule-based diagnosis: prior prevalence plus weather and seasonal bonuses.

    Bonuses overlap on purpose ("blight" can earn both a weather and a seasonal
    bonus); the ceiling is what keeps them in check.
    """

    def __init__(self, knowledge: KnowledgeService, policy: ScoringPolicy | None = None):
        self.knowledge = knowledge
        self.policy = policy or ScoringPolicy()

    def weather_score(self, disease: DiseaseRecord, weather: WeatherReading | None) -> float:
        if weather is None:
            return 0.0

        p = self.policy
        causes = disease.causes_text
        name = disease.name.lower()
        score = 0.0

        if weather.humidity > p.humid_threshold:
            if any(tag in causes for tag in ("fungal", "humid", "moisture")) or "blight" in name:
                score += p.humid_bonus

        low, high = p.warm_range
        if low < weather.temperature < high:
            if "warm" in causes or "blast" in name:
                score += p.warm_bonus

        if weather.temperature < p.cool_max_temp and weather.humidity > p.cool_min_humidity:
            if "late blight" in name or "cool" in causes:
                score += p.cool_bonus

        return score

    def seasonal_score(self, disease: DiseaseRecord, weather: WeatherReading | None) -> float:
        if weather is None or weather.temperature is None:
            return 0.0

        p = self.policy
        temp = weather.temperature
        name = disease.name.lower()
        score = 0.0

        # summer
        if temp > p.summer_min_temp:
            if "bacterial" in name or "wilt" in name:
                score += p.summer_bonus

        # monsoon
        low, high = p.monsoon_range
        if low < temp < high and weather.humidity > p.monsoon_min_humidity:
            if any(word in name for word in ("blight", "spot", "blast")):
                score += p.monsoon_bonus

        return score

    def score_disease(self, crop_type: str, disease: DiseaseRecord, weather: WeatherReading | None) -> ScoredCandidate:
        base = catalog.base_confidence(crop_type, disease.name, self.policy.default_base)
        factors = [f"Base: {_pct(base)}"]

        weather_bonus = self.weather_score(disease, weather)
        if weather_bonus > 0:
            factors.append(f"Weather: +{_pct(weather_bonus)}")

        seasonal_bonus = self.seasonal_score(disease, weather)
        if seasonal_bonus > 0:
            factors.append(f"Season: +{_pct(seasonal_bonus)}")

        total = base + weather_bonus + seasonal_bonus
        confidence = max(self.policy.floor, min(total, self.policy.ceiling))

        return ScoredCandidate(
            name=disease.name,
            confidence=round(confidence, 4),
            factors=factors,
            severity=disease.severity or "medium",
            symptoms=list(disease.symptoms),
            treatments=list(disease.treatments),
        )

    def score(self, crop_type: str, weather: WeatherReading | None = None) -> list[ScoredCandidate]:
        crop = normalize_crop(crop_type)
        diseases = self.knowledge.candidates(crop)

        if not diseases:
            name, confidence = catalog.fallback_prediction(crop)
            logger.warning("No candidate diseases for %r; using synthetic %s", crop, name)
            return [
                ScoredCandidate(
                    name=name,
                    confidence=confidence,
                    factors=[f"Base: {_pct(confidence)}"],
                    severity="medium",
                    symptoms=[],
                    treatments=[],
                )
            ]

        scored = [self.score_disease(crop, d, weather) for d in diseases]
        # sorted() is stable: ties keep knowledge-base order
        scored = sorted(scored, key=lambda c: c.confidence, reverse=True)

        logger.debug(
            "Scored %s candidates for %r: %s",
            len(scored),
            crop,
            [(c.name, c.confidence) for c in scored],
        )
        return scored

    def alternatives(self, scored: list[ScoredCandidate]) -> list[AlternativePrediction]:
        return [
            AlternativePrediction(disease_name=c.name, confidence=c.confidence)
            for c in scored[1 : 1 + self.policy.max_alternatives]
        ]
