from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    # Knowledge store (CSV or Excel); empty means static catalog only
    disease_data_path: str = os.getenv("DISEASE_DATA_PATH", "")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # External disease model
    ai_model_base_url: str = os.getenv("AI_MODEL_BASE_URL", "")
    ai_model_timeout_s: float = float(os.getenv("AI_MODEL_TIMEOUT_S", "30"))

    # Weather
    openweather_api_key: str = os.getenv("OPENWEATHER_API_KEY", "")
    weather_timeout_s: float = float(os.getenv("WEATHER_TIMEOUT_S", "15"))
    weather_retries: int = int(os.getenv("WEATHER_RETRIES", "3"))
    weather_backoff_s: float = float(os.getenv("WEATHER_BACKOFF_S", "1.0"))


settings = Settings()
