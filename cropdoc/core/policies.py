from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfidenceBands:
    very_low: float = 0.4
    low: float = 0.6
    moderate: float = 0.8


@dataclass(frozen=True)
class ScoringPolicy:
    default_base: float = 0.35
    floor: float = 0.10
    ceiling: float = 0.95
    max_alternatives: int = 3

    # weather contribution
    humid_threshold: float = 70.0
    humid_bonus: float = 0.15
    warm_range: tuple[float, float] = (25.0, 35.0)
    warm_bonus: float = 0.10
    cool_max_temp: float = 20.0
    cool_min_humidity: float = 80.0
    cool_bonus: float = 0.20

    # seasonal contribution
    summer_min_temp: float = 30.0
    summer_bonus: float = 0.10
    monsoon_range: tuple[float, float] = (20.0, 30.0)
    monsoon_min_humidity: float = 60.0
    monsoon_bonus: float = 0.10


@dataclass(frozen=True)
class RiskPolicy:
    high_humidity: float = 80.0
    heat_stress: float = 35.0
    cold_stress: float = 10.0
    wet_humidity: float = 70.0
    drought_humidity: float = 30.0


@dataclass(frozen=True)
class AlertPolicy:
    # next three days at 8 readings/day
    forecast_window: int = 24
    default_temperature: float = 25.0
    default_humidity: float = 60.0
    default_condition: str = "Clear"


@dataclass(frozen=True)
class Policies:
    confidence: ConfidenceBands = ConfidenceBands()
    scoring: ScoringPolicy = ScoringPolicy()
    risk: RiskPolicy = RiskPolicy()
    alerts: AlertPolicy = AlertPolicy()
