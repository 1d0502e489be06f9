from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from cropdoc.core import catalog
from cropdoc.core.policies import Policies
from cropdoc.core.response import ResponseBuilder
from cropdoc.core.schemas import PredictionMethod, PredictionResult, WeatherReading, normalize_crop
from cropdoc.core.scoring import DiseaseScorer
from cropdoc.errors import ModelUnavailable
from cropdoc.services.knowledge_service import KnowledgeService
from cropdoc.services.model_service import ExternalModelClient


logger = logging.getLogger(__name__)


class PredictionPipeline:
    """
    Tries three strategies in order and returns the first that produces a result:

    1. external model (only when a client is configured)
    2. rule-based scorer
    3. static per-crop guess
    """

    def __init__(
        self,
        knowledge: KnowledgeService,
        policies: Policies,
        model: ExternalModelClient | None = None,
        scorer: DiseaseScorer | None = None,
        response_builder: ResponseBuilder | None = None,
    ):
        self.knowledge = knowledge
        self.policies = policies
        self.model = model
        self.scorer = scorer or DiseaseScorer(knowledge=knowledge, policy=policies.scoring)
        self.response_builder = response_builder or ResponseBuilder(bands=policies.confidence)

    def predict(
        self,
        crop_type: str,
        weather: WeatherReading | None = None,
        image_url: str | None = None,
        environmental_data: dict[str, Any] | None = None,
    ) -> PredictionResult:
        crop = normalize_crop(crop_type)

        result = self._external_model(crop, weather, image_url, environmental_data)
        if result is None:
            result = self._rule_based(crop, weather)
        if result is None:
            result = self._static_fallback(crop)

        logger.info(
            "Prediction for %r: %s (%.2f) via %s",
            crop,
            result.disease_name,
            result.confidence,
            result.method.value,
        )

        return replace(
            result,
            recommendation=self.response_builder.build_recommendation(result.confidence),
            disease=result.disease or self.knowledge.find(crop, result.disease_name),
        )

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------
    def _external_model(
        self,
        crop: str,
        weather: WeatherReading | None,
        image_url: str | None,
        environmental_data: dict[str, Any] | None,
    ) -> PredictionResult | None:
        if self.model is None:
            logger.debug("No external model configured; using rule-based prediction")
            return None

        try:
            result = self.model.predict(
                crop_type=crop,
                image_url=image_url,
                weather=weather,
                environmental_data=environmental_data,
            )
        except ModelUnavailable as exc:
            logger.warning("External model failed, falling back to rules: %s", exc)
            return None
        except Exception as exc:
            logger.error("External model client error, falling back to rules: %s", exc)
            return None

        return replace(result, details={"cropType": crop, "weatherConsidered": weather is not None})

    def _rule_based(self, crop: str, weather: WeatherReading | None) -> PredictionResult | None:
        try:
            scored = self.scorer.score(crop, weather)
        except Exception as exc:
            logger.error("Rule-based prediction failed for %r: %s", crop, exc)
            return None

        top = scored[0]
        return PredictionResult(
            disease_name=top.name,
            confidence=top.confidence,
            alternatives=self.scorer.alternatives(scored),
            method=PredictionMethod.RULE_BASED,
            details={
                "cropType": crop,
                "weatherConsidered": weather is not None,
                "totalDiseases": len(scored),
                "factors": list(top.factors),
            },
        )

    def _static_fallback(self, crop: str) -> PredictionResult:
        name, confidence = catalog.fallback_prediction(crop)
        return PredictionResult(
            disease_name=name,
            confidence=confidence,
            alternatives=[],
            method=PredictionMethod.FALLBACK,
            details={"cropType": crop},
        )
