from __future__ import annotations

from cropdoc.core.policies import ConfidenceBands


class ResponseBuilder:
    def __init__(self, bands: ConfidenceBands | None = None):
        self.bands = bands or ConfidenceBands()

    def build_recommendation(self, confidence: float) -> str:
        if confidence < self.bands.very_low:
            return "Very low confidence prediction. Strongly recommend consulting an agricultural expert."
        if confidence < self.bands.low:
            return "Low confidence prediction. Consider consulting an expert for confirmation."
        if confidence < self.bands.moderate:
            return "Moderate confidence prediction. Monitor closely and take preventive measures."
        return "High confidence prediction. Follow recommended treatment guidelines."
