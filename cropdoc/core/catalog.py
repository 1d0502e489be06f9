"""
Static disease knowledge used when the knowledge store has nothing for a crop.

- BASE_CONFIDENCE: prior prevalence per (crop, disease); not evidence.
- FALLBACK_DISEASES: built-in catalog, populated for tomato and rice only.
- GENERIC_DISEASE: single entry returned for every other crop type.
- FALLBACK_PREDICTIONS: last-resort single guess per crop.
"""

from __future__ import annotations

from cropdoc.core.schemas import DiseaseRecord


BASE_CONFIDENCE: dict[str, dict[str, float]] = {
    "tomato": {
        "Early Blight": 0.60,
        "Late Blight": 0.55,
        "Bacterial Speck": 0.45,
        "Anthracnose": 0.50,
        "Septoria Leaf Spot": 0.45,
        "Bacterial Wilt": 0.40,
    },
    "rice": {
        "Rice Blast": 0.65,
        "Brown Spot": 0.55,
        "Bacterial Blight": 0.60,
        "Sheath Blight": 0.50,
        "Tungro Virus": 0.40,
    },
}


FALLBACK_DISEASES: dict[str, list[DiseaseRecord]] = {
    "tomato": [
        DiseaseRecord(
            name="Early Blight",
            crop_type="tomato",
            symptoms=["dark spots", "concentric rings", "yellow halos", "fruit lesions"],
            causes=["fungal infection", "alternaria solani", "warm humid conditions"],
            treatments=["fungicide spray", "copper treatments", "remove affected parts"],
            severity="medium",
        ),
        DiseaseRecord(
            name="Late Blight",
            crop_type="tomato",
            symptoms=["water-soaked lesions", "white fuzzy growth", "brown patches"],
            causes=["phytophthora infestans", "cool wet weather", "high humidity"],
            treatments=["copper fungicides", "remove infected plants", "improve drainage"],
            severity="high",
        ),
        DiseaseRecord(
            name="Bacterial Speck",
            crop_type="tomato",
            symptoms=["small dark spots", "yellow halos", "pinpoint lesions"],
            causes=["pseudomonas syringae", "cool wet conditions", "wind-driven rain"],
            treatments=["copper bactericides", "remove infected plants"],
            severity="low",
        ),
    ],
    "rice": [
        DiseaseRecord(
            name="Rice Blast",
            crop_type="rice",
            symptoms=["diamond-shaped lesions", "gray centers", "dark borders"],
            causes=["fungal infection", "high humidity", "warm temperature"],
            treatments=["fungicide spray", "resistant varieties", "crop rotation"],
            severity="high",
        ),
        DiseaseRecord(
            name="Brown Spot",
            crop_type="rice",
            symptoms=["brown oval spots", "yellow halos", "seedling blight"],
            causes=["fungal infection", "nutrient deficiency", "drought stress"],
            treatments=["seed treatment", "foliar fungicides", "balanced nutrition"],
            severity="medium",
        ),
    ],
}


GENERIC_DISEASE_NAME = "General Plant Disease"


def generic_disease(crop_type: str) -> DiseaseRecord:
    return DiseaseRecord(
        name=GENERIC_DISEASE_NAME,
        crop_type=crop_type or "other",
        symptoms=["discoloration", "spots", "wilting"],
        causes=["various pathogens", "environmental stress"],
        treatments=["general fungicide", "improve plant care"],
        severity="medium",
    )


FALLBACK_PREDICTIONS: dict[str, tuple[str, float]] = {
    "tomato": ("Early Blight", 0.4),
    "rice": ("Rice Blast", 0.4),
}
DEFAULT_FALLBACK_PREDICTION: tuple[str, float] = (GENERIC_DISEASE_NAME, 0.3)


def base_confidence(crop_type: str, disease_name: str, default: float = 0.35) -> float:
    return BASE_CONFIDENCE.get(crop_type, {}).get(disease_name, default)


def static_candidates(crop_type: str) -> list[DiseaseRecord]:
    if crop_type in FALLBACK_DISEASES:
        return list(FALLBACK_DISEASES[crop_type])
    return [generic_disease(crop_type)]


def fallback_prediction(crop_type: str) -> tuple[str, float]:
    return FALLBACK_PREDICTIONS.get(crop_type, DEFAULT_FALLBACK_PREDICTION)
