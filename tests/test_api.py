"""
HTTP surface over the engine, with no external model and no weather key configured.
Run from project root: python -m pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from cropdoc import api
from cropdoc.config import Settings
from cropdoc.engine import CropDoctor


OFFLINE = Settings(ai_model_base_url="", openweather_api_key="", disease_data_path="")


@pytest.fixture
def client(monkeypatch):
    with TestClient(api.app) as test_client:
        monkeypatch.setattr(api, "doctor", CropDoctor(config=OFFLINE))
        yield test_client


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_predict_with_weather(client):
    response = client.post("/diseases/predict", json={
        "cropType": "tomato",
        "weather": {"temperature": 18, "humidity": 90, "condition": "Rain"},
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["prediction"]["diseaseName"] == "Late Blight"
    assert data["predictionMethod"] == "enhanced_rule_based"
    assert len(data["prediction"]["alternativePredictions"]) == 2
    assert data["diseaseDetails"]["severity"] == "high"


def test_predict_with_location_uses_fallback_weather(client):
    response = client.post("/diseases/predict", json={
        "cropType": "rice",
        "location": {"latitude": 16.3, "longitude": 80.4},
    })

    data = response.json()["data"]
    assert data["details"]["weatherConsidered"] is True
    assert data["prediction"]["diseaseName"] == "Rice Blast"


def test_predict_requires_crop_type(client):
    assert client.post("/diseases/predict", json={}).status_code == 422


def test_weather_risk(client):
    response = client.post("/weather/risk", json={"temperature": 25, "humidity": 50, "condition": "Clear"})

    data = response.json()["data"]
    assert data["overallRisk"] == "low"
    assert data["recommendations"] == ["Continue regular monitoring and care"]


def test_invalid_coordinates(client):
    assert client.get("/weather/alerts", params={"latitude": 120, "longitude": 10}).status_code == 400


def test_alerts_degrade_without_weather_source(client):
    response = client.get("/weather/alerts", params={"latitude": 16.3, "longitude": 80.4, "cropType": "rice"})

    data = response.json()["data"]
    assert data["alertCount"] == 0
    assert data["dataSource"] == "fallback"


def test_current_weather_fallback(client):
    data = client.get("/weather/current", params={"latitude": 16.3, "longitude": 80.4}).json()["data"]
    assert data["source"] == "fallback"
    assert data["temperature"] == 25.0
