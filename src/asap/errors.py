"""Custom exception hierarchy for ASAP."""

from __future__ import annotations


class AsapError(Exception):
    """Base class for all custom errors raised by ASAP."""


# --- Crop pipeline ---

class CropError(AsapError):
    """Base class for recoverable failures while producing a cropped image."""


class FetchError(CropError):
    """Raised when a remote image source cannot be retrieved."""

    def __init__(self, message: str, *, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(CropError):
    """Raised when image bytes cannot be decoded or report invalid dimensions."""


class RasterizationError(CropError):
    """Raised when drawing or encoding the cropped bitmap fails."""


# --- Configuration ---

class JsonReadError(AsapError):
    """Raised when a JSON document is missing or malformed."""


class SettingsLoadError(AsapError):
    """Raised when the settings file cannot be read."""


class SettingsValidationError(AsapError):
    """Raised when the settings file fails schema validation."""
