"""
Prediction orchestration: external model first, then rules, then static guess.
Run from project root: python -m pytest tests/test_pipeline.py -v
"""

import pytest
import requests

from cropdoc.core.policies import Policies
from cropdoc.core.pipeline import PredictionPipeline
from cropdoc.core.response import ResponseBuilder
from cropdoc.core.schemas import CROP_TYPES, PredictionMethod, WeatherReading
from cropdoc.engine import predict
from cropdoc.services import model_service
from cropdoc.services.knowledge_service import KnowledgeService
from cropdoc.services.model_service import ExternalModelClient, is_configured


COOL_RAIN = WeatherReading(temperature=18, humidity=90, condition="Rain")


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class ExplodingScorer:
    def score(self, crop_type, weather=None):
        raise RuntimeError("scorer bug")


def _pipeline(model=None, scorer=None) -> PredictionPipeline:
    return PredictionPipeline(knowledge=KnowledgeService(), policies=Policies(), model=model, scorer=scorer)


def _stub_post(monkeypatch, handler):
    calls = []

    def fake_post(url, json=None, timeout=None, **kwargs):
        calls.append({"url": url, "json": json, "timeout": timeout})
        return handler()

    monkeypatch.setattr(model_service.requests, "post", fake_post)
    return calls


class TestRuleBased:
    def test_no_model_uses_rules(self):
        result = _pipeline().predict("tomato", COOL_RAIN)

        assert result.method is PredictionMethod.RULE_BASED
        assert result.disease_name == "Late Blight"
        assert result.confidence == pytest.approx(0.90)
        assert [a.disease_name for a in result.alternatives] == ["Early Blight", "Bacterial Speck"]
        assert result.recommendation == "High confidence prediction. Follow recommended treatment guidelines."
        assert result.details["factors"] == ["Base: 55%", "Weather: +35%"]
        assert result.disease.name == "Late Blight"

    def test_unknown_crop(self):
        result = predict("unknown_crop")

        assert result.method in (PredictionMethod.RULE_BASED, PredictionMethod.FALLBACK)
        assert result.disease_name == "General Plant Disease"
        assert 0.1 <= result.confidence <= 0.4
        assert result.recommendation.startswith("Very low confidence prediction.")

    @pytest.mark.parametrize("crop", CROP_TYPES)
    def test_alternatives_invariants(self, crop):
        result = _pipeline().predict(crop, COOL_RAIN)
        candidates = {d.name for d in KnowledgeService().candidates(crop)}
        confidences = [a.confidence for a in result.alternatives]

        assert len(result.alternatives) <= 3
        assert all(c <= result.confidence for c in confidences)
        assert confidences == sorted(confidences, reverse=True)
        assert {a.disease_name for a in result.alternatives} <= candidates
        assert result.disease_name in candidates

    def test_accepts_weather_dict(self):
        result = predict("tomato", {"temperature": 18, "humidity": 90, "weather": {"main": "Rain"}})
        assert result.disease_name == "Late Blight"

    def test_scorer_failure_uses_static_guess(self):
        result = _pipeline(scorer=ExplodingScorer()).predict("rice")

        assert result.method is PredictionMethod.FALLBACK
        assert (result.disease_name, result.confidence) == ("Rice Blast", 0.4)
        assert result.alternatives == []


class TestExternalModel:
    def test_success_is_taken_verbatim(self, monkeypatch):
        body = {
            "diseaseName": "Leaf Mold",
            "confidence": 0.82,
            "alternativePredictions": [
                {"diseaseName": "Early Blight", "confidence": 0.1},
                {"diseaseName": "Late Blight", "confidence": 0.05},
            ],
        }
        calls = _stub_post(monkeypatch, lambda: FakeResponse(body))
        client = ExternalModelClient("http://model.local/", timeout_s=30)

        result = _pipeline(model=client).predict("Tomato", COOL_RAIN, image_url="http://img/1.jpg")

        assert result.method is PredictionMethod.EXTERNAL_MODEL
        assert result.disease_name == "Leaf Mold"
        assert result.confidence == 0.82
        assert [a.disease_name for a in result.alternatives] == ["Early Blight", "Late Blight"]
        assert result.recommendation.startswith("High confidence prediction.")

        assert calls[0]["url"] == "http://model.local/predict"
        assert calls[0]["timeout"] == 30
        assert calls[0]["json"]["cropType"] == "tomato"
        assert calls[0]["json"]["imageUrl"] == "http://img/1.jpg"
        assert calls[0]["json"]["weatherData"]["humidity"] == 90

    def test_alternatives_are_sorted_capped_and_bounded(self, monkeypatch):
        body = {
            "diseaseName": "Rice Blast",
            "confidence": 0.6,
            "alternativePredictions": [
                {"diseaseName": "A", "confidence": 0.1},
                {"diseaseName": "B", "confidence": 0.7},
                {"diseaseName": "C", "confidence": 0.3},
                {"diseaseName": "D", "confidence": 0.2},
                {"diseaseName": "E", "confidence": 0.25},
            ],
        }
        _stub_post(monkeypatch, lambda: FakeResponse(body))

        result = _pipeline(model=ExternalModelClient("http://model.local")).predict("rice")

        assert [a.disease_name for a in result.alternatives] == ["C", "E", "D"]

    def test_timeout_falls_back_to_rules(self, monkeypatch):
        def boom():
            raise requests.Timeout("read timed out")

        _stub_post(monkeypatch, boom)
        result = _pipeline(model=ExternalModelClient("http://model.local")).predict("tomato", COOL_RAIN)

        assert result.method is PredictionMethod.RULE_BASED
        assert result.disease_name == "Late Blight"

    @pytest.mark.parametrize(
        "response",
        [
            FakeResponse({"error": "boom"}, status_code=503),
            FakeResponse(ValueError("not json")),
            FakeResponse(["not", "an", "object"]),
            FakeResponse({"confidence": 0.9}),
            FakeResponse({"diseaseName": "X", "confidence": "high"}),
            FakeResponse({"diseaseName": "X", "confidence": 1.7}),
            FakeResponse({"diseaseName": "X", "confidence": 0.9, "alternativePredictions": 5}),
            FakeResponse({"diseaseName": "X", "confidence": 0.9, "alternativePredictions": "Blight"}),
        ],
    )
    def test_bad_responses_fall_back_to_rules(self, monkeypatch, response):
        _stub_post(monkeypatch, lambda: response)
        result = _pipeline(model=ExternalModelClient("http://model.local")).predict("rice")

        assert result.method is PredictionMethod.RULE_BASED
        assert result.disease_name == "Rice Blast"

    def test_bad_alternative_is_dropped_not_the_prediction(self, monkeypatch):
        body = {
            "diseaseName": "Rice Blast",
            "confidence": 0.7,
            "alternativePredictions": [
                {"diseaseName": "Brown Spot", "confidence": 0.2},
                {"diseaseName": "Sheath Blight"},
                {"diseaseName": "Bacterial Blight", "confidence": "low"},
                "Tungro",
                {"diseaseName": "False Smut", "confidence": 0.1},
            ],
        }
        _stub_post(monkeypatch, lambda: FakeResponse(body))

        result = _pipeline(model=ExternalModelClient("http://model.local")).predict("rice")

        assert result.method is PredictionMethod.EXTERNAL_MODEL
        assert result.disease_name == "Rice Blast"
        assert [a.disease_name for a in result.alternatives] == ["Brown Spot", "False Smut"]

    def test_client_bug_falls_back_to_rules(self):
        class BrokenClient:
            def predict(self, **kwargs):
                raise RuntimeError("client bug")

        result = _pipeline(model=BrokenClient()).predict("rice")

        assert result.method is PredictionMethod.RULE_BASED
        assert result.disease_name == "Rice Blast"


@pytest.mark.parametrize("url, expected", [
    ("http://model.local", True),
    ("", False),
    ("   ", False),
    ("undefined", False),
    (None, False),
])
def test_endpoint_configuration(url, expected):
    assert is_configured(url) is expected


@pytest.mark.parametrize("confidence, prefix", [
    (0.1, "Very low confidence"),
    (0.39, "Very low confidence"),
    (0.4, "Low confidence"),
    (0.59, "Low confidence"),
    (0.6, "Moderate confidence"),
    (0.79, "Moderate confidence"),
    (0.8, "High confidence"),
    (0.95, "High confidence"),
])
def test_confidence_bands(confidence, prefix):
    assert ResponseBuilder().build_recommendation(confidence).startswith(prefix)
