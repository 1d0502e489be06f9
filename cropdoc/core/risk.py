from __future__ import annotations

from cropdoc.core.policies import RiskPolicy
from cropdoc.core.schemas import Risk, RiskAssessment, WeatherReading


RECOMMENDATIONS: dict[str, list[str]] = {
    "high-humidity": [
        "Ensure good air circulation around plants",
        "Avoid overhead watering",
        "Apply preventive fungicide if necessary",
    ],
    "heat-stress": [
        "Provide shade during hottest parts of the day",
        "Increase watering frequency",
        "Monitor for increased pest activity",
    ],
    "cold-stress": [
        "Protect plants from frost",
        "Reduce watering frequency",
        "Consider using row covers",
    ],
    "wet-conditions": [
        "Improve drainage around plants",
        "Remove infected plant material promptly",
        "Apply preventive copper-based fungicides",
    ],
    "drought-stress": [
        "Increase irrigation frequency",
        "Apply mulch to conserve soil moisture",
        "Monitor for spider mites and aphids",
    ],
}
DEFAULT_RECOMMENDATIONS = ["Continue regular monitoring and care"]


def overall_risk(risk_count: int) -> str:
    if risk_count > 2:
        return "high"
    if risk_count > 0:
        return "medium"
    return "low"


def recommendations_for(risks: list[Risk]) -> list[str]:
    seen: dict[str, None] = {}
    for risk in risks:
        for tip in RECOMMENDATIONS.get(risk.type, DEFAULT_RECOMMENDATIONS):
            seen.setdefault(tip, None)
    return list(seen)


class WeatherRiskAnalyzer:
    def __init__(self, policy: RiskPolicy | None = None):
        self.policy = policy or RiskPolicy()

    def analyze(self, weather: WeatherReading) -> RiskAssessment:
        p = self.policy
        condition = weather.condition_text
        raining = "Rain" in condition
        risks: list[Risk] = []

        if weather.humidity > p.high_humidity:
            risks.append(Risk(
                type="high-humidity",
                level="high",
                message="High humidity increases risk of fungal diseases",
                conditions={"humidity": weather.humidity},
            ))

        if weather.temperature > p.heat_stress:
            risks.append(Risk(
                type="heat-stress",
                level="medium",
                message="High temperature may cause heat stress and increase pest activity",
                conditions={"temperature": weather.temperature},
            ))
        elif weather.temperature < p.cold_stress:
            risks.append(Risk(
                type="cold-stress",
                level="medium",
                message="Low temperature may cause cold stress and slow plant growth",
                conditions={"temperature": weather.temperature},
            ))

        if raining and weather.humidity > p.wet_humidity:
            risks.append(Risk(
                type="wet-conditions",
                level="high",
                message="Wet conditions significantly increase risk of bacterial and fungal infections",
                conditions={"weather": condition, "humidity": weather.humidity},
            ))

        if weather.humidity < p.drought_humidity and not raining:
            risks.append(Risk(
                type="drought-stress",
                level="medium",
                message="Dry conditions may cause drought stress and increase spider mite risk",
                conditions={"humidity": weather.humidity},
            ))

        fired = len(risks)
        if fired == 0:
            risks.append(Risk(
                type="optimal",
                level="low",
                message="Weather conditions appear favorable for plant health",
                conditions={
                    "temperature": weather.temperature,
                    "humidity": weather.humidity,
                    "weather": condition,
                },
            ))

        return RiskAssessment(
            overall_risk=overall_risk(fired),
            risks=risks,
            recommendations=recommendations_for(risks),
        )
