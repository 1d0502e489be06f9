from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from cropdoc.config import settings
from cropdoc.engine import CropDoctor
from cropdoc.weather import validate_coordinates

logger = logging.getLogger(__name__)

app = FastAPI(
    title="CropDoc API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

doctor: CropDoctor | None = None


class WeatherPayload(BaseModel):
    temperature: float
    humidity: float = Field(ge=0, le=100)
    windSpeed: float | None = None
    condition: str | None = None
    precipitationProbability: float | None = None


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class PredictRequest(BaseModel):
    cropType: str = Field(min_length=1)
    imageUrl: str | None = None
    weather: WeatherPayload | None = None
    location: Coordinates | None = None
    environmentalData: dict[str, Any] | None = None


@app.on_event("startup")
def startup_event():
    global doctor
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    logger.info("🌱 Initializing CropDoctor...")
    doctor = CropDoctor(config=settings)
    logger.info("✅ CropDoctor ready")


def _doctor() -> CropDoctor:
    if doctor is None:
        raise HTTPException(status_code=500, detail="Engine not initialized")
    return doctor


def _coordinates(latitude: float, longitude: float) -> None:
    if not validate_coordinates(latitude, longitude):
        raise HTTPException(status_code=400, detail="Invalid coordinates provided")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/diseases/predict")
def predict_disease(request: PredictRequest):
    engine = _doctor()
    location = request.location

    data = engine.predict(
        crop_type=request.cropType,
        weather=request.weather.model_dump(exclude_none=True) if request.weather else None,
        image_url=request.imageUrl,
        environmental_data=request.environmentalData,
        latitude=location.latitude if location else None,
        longitude=location.longitude if location else None,
    )
    return {"status": "success", "data": data}


@app.post("/weather/risk")
def weather_risk(weather: WeatherPayload):
    data = _doctor().analyze_weather_risk(weather.model_dump(exclude_none=True))
    return {"status": "success", "data": data}


@app.get("/weather/current")
def current_weather(latitude: float = Query(...), longitude: float = Query(...)):
    engine = _doctor()
    _coordinates(latitude, longitude)
    return {"status": "success", "data": engine.current_weather(latitude, longitude)}


@app.get("/weather/forecast")
def weather_forecast(latitude: float = Query(...), longitude: float = Query(...)):
    engine = _doctor()
    _coordinates(latitude, longitude)
    return {"status": "success", "data": engine.forecast(latitude, longitude)}


@app.get("/weather/alerts")
def weather_alerts(
    latitude: float = Query(...),
    longitude: float = Query(...),
    cropType: str = Query("general"),
):
    engine = _doctor()
    _coordinates(latitude, longitude)
    return {"status": "success", "data": engine.agriculture_alerts(latitude, longitude, cropType)}
