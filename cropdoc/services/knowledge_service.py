from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

from cropdoc.core import catalog
from cropdoc.core.schemas import SEVERITIES, DiseaseRecord, normalize_crop


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "crop_type")
LIST_SEPARATOR = ";"


class DiseaseStore(Protocol):
    def find_active_diseases(self, crop_type: str) -> list[DiseaseRecord]:
        ...


class EmptyDiseaseStore:
    """Store with no records; every crop resolves to the static catalog."""

    def find_active_diseases(self, crop_type: str) -> list[DiseaseRecord]:
        return []


def _missing(value: Any) -> bool:
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _split(value: Any) -> list[str]:
    if _missing(value):
        return []
    return [part.strip() for part in str(value).split(LIST_SEPARATOR) if part.strip()]


def _text(value: Any, default: str = "") -> str:
    if _missing(value):
        return default
    return str(value).strip()


def _active(value: Any) -> bool:
    if _missing(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ("false", "0", "no", "n")
    return bool(value)


class TableDiseaseStore:
    """
    Tabular disease knowledge (CSV or Excel) loaded with pandas.

    Columns: name, crop_type, causes, symptoms, treatments, prevention,
    severity, description, is_active. List columns are ';'-separated.
    A table without the required columns behaves as an empty store.
    """

    def __init__(self, frame: pd.DataFrame):
        missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
        if missing:
            logger.warning("Disease table missing columns %s; treating store as empty", missing)
            frame = pd.DataFrame(columns=list(REQUIRED_COLUMNS))
        self.frame = frame

    @classmethod
    def from_path(cls, path: str | Path) -> TableDiseaseStore:
        path = Path(path)
        if not path.exists():
            logger.warning("Disease data not found at %s; using static catalog", path)
            return cls(pd.DataFrame(columns=list(REQUIRED_COLUMNS)))

        try:
            if path.suffix.lower() in (".xlsx", ".xls"):
                frame = pd.read_excel(path)
            else:
                frame = pd.read_csv(path)
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
            logger.warning("Could not read disease data at %s: %s", path, exc)
            return cls(pd.DataFrame(columns=list(REQUIRED_COLUMNS)))

        logger.info("Loaded %s disease records from %s", len(frame), path)
        return cls(frame)

    def find_active_diseases(self, crop_type: str) -> list[DiseaseRecord]:
        if self.frame.empty:
            return []

        mask = self.frame["crop_type"].astype(str).str.strip().str.lower() == normalize_crop(crop_type)
        rows = self.frame[mask]

        records: list[DiseaseRecord] = []
        for _, row in rows.iterrows():
            if not _active(row.get("is_active")):
                continue
            severity = _text(row.get("severity"), "medium").lower()
            records.append(
                DiseaseRecord(
                    name=_text(row.get("name")),
                    crop_type=normalize_crop(row.get("crop_type")),
                    causes=_split(row.get("causes")),
                    symptoms=_split(row.get("symptoms")),
                    treatments=_split(row.get("treatments")),
                    prevention=_split(row.get("prevention")),
                    severity=severity if severity in SEVERITIES else "medium",
                    description=_text(row.get("description")),
                )
            )
        return records


class KnowledgeService:
    def __init__(self, store: DiseaseStore | None = None):
        self.store = store or EmptyDiseaseStore()

    def candidates(self, crop_type: str) -> list[DiseaseRecord]:
        """Store records for the crop, or the static catalog when the store has none."""
        crop = normalize_crop(crop_type)

        try:
            records = self.store.find_active_diseases(crop)
        except Exception as exc:
            logger.warning("Disease store lookup failed for %r: %s", crop, exc)
            records = []

        if records:
            return list(records)

        logger.debug("No stored diseases for %r; using static catalog", crop)
        return catalog.static_candidates(crop)

    def find(self, crop_type: str, disease_name: str | None) -> DiseaseRecord | None:
        if not disease_name:
            return None
        needle = disease_name.strip().lower()
        for record in self.candidates(crop_type):
            if needle in record.name.lower():
                return record
        return None
