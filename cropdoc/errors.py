from __future__ import annotations


class CropDocError(Exception):
    """Base class for collaborator failures inside the engine."""


class ModelUnavailable(CropDocError):
    """The external disease model failed, timed out or returned a malformed body."""


class WeatherUnavailable(CropDocError):
    """The weather source could not be reached after retries, or is not configured."""
