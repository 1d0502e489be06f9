from __future__ import annotations

import logging
from datetime import datetime, timezone

from cropdoc.core.policies import AlertPolicy
from cropdoc.core.risk import WeatherRiskAnalyzer
from cropdoc.core.schemas import Alert, AlertReport, WeatherReading


logger = logging.getLogger(__name__)

FORECAST_RECOMMENDATIONS = [
    "Check weather forecast daily",
    "Prepare preventive treatments",
    "Ensure drainage systems are clear",
]


class AlertComposer:
    """
    Elevates risk assessments to user-facing alerts.

    - current conditions: one alert when the assessment is not "low"
    - forecast: one warning if ANY entry in the window assesses "high"
    """

    def __init__(self, analyzer: WeatherRiskAnalyzer | None = None, policy: AlertPolicy | None = None):
        self.analyzer = analyzer or WeatherRiskAnalyzer()
        self.policy = policy or AlertPolicy()

    def default_reading(self) -> WeatherReading:
        return WeatherReading(
            temperature=self.policy.default_temperature,
            humidity=self.policy.default_humidity,
            condition=self.policy.default_condition,
            source="fallback",
        )

    def _forecast_has_high_risk(self, forecast: list[WeatherReading]) -> bool:
        for reading in forecast[: self.policy.forecast_window]:
            if self.analyzer.analyze(reading).overall_risk == "high":
                return True
        return False

    def compose(
        self,
        current: WeatherReading | None,
        forecast: list[WeatherReading] | None,
        crop_type: str = "general",
    ) -> AlertReport:
        crop = crop_type or "general"
        if current is None:
            logger.info("No current weather; using default reading for alerts")
            current = self.default_reading()

        try:
            alerts: list[Alert] = []

            assessment = self.analyzer.analyze(current)
            if assessment.overall_risk != "low":
                alerts.append(Alert(
                    type="current-weather",
                    severity=assessment.overall_risk,
                    title="Current Weather Alert",
                    message=f"Current weather conditions pose {assessment.overall_risk} risk to {crop} crops",
                    details=assessment.risks,
                    recommendations=assessment.recommendations,
                ))

            if forecast and self._forecast_has_high_risk(forecast):
                alerts.append(Alert(
                    type="forecast-warning",
                    severity="medium",
                    title="Weather Forecast Warning",
                    message=f"Upcoming weather conditions may increase disease risk for {crop}",
                    details="Monitor weather conditions and take preventive measures",
                    recommendations=list(FORECAST_RECOMMENDATIONS),
                ))

            return AlertReport(
                alerts=alerts,
                data_source="fallback" if current.source == "fallback" else "live",
                last_updated=datetime.now(timezone.utc),
                location=current.location,
            )

        except Exception as exc:
            logger.error("Agriculture alerts failed: %s", exc)
            return AlertReport(
                alerts=[],
                data_source="fallback",
                last_updated=datetime.now(timezone.utc),
                location=current.location,
                error="Unable to compute weather alerts",
            )
