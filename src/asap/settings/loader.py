"""Load and persist the crop settings file."""

from __future__ import annotations

import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..config import FETCH_TIMEOUT_SEC, JPEG_QUALITY, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP
from ..errors import JsonReadError, SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "ASAP" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "ASAP" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ASAP" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "ASAP" / "settings.json"
    return Path.home() / ".config" / "ASAP" / "settings.json"


@dataclass(frozen=True)
class CropSettings:
    """Tunable values of the crop workflow."""

    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    zoom_step: float = ZOOM_STEP
    jpeg_quality: float = JPEG_QUALITY
    fetch_timeout_sec: float = FETCH_TIMEOUT_SEC

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "CropSettings":
        crop = data.get("crop", {})
        settings = cls(
            min_zoom=float(crop.get("min_zoom", MIN_ZOOM)),
            max_zoom=float(crop.get("max_zoom", MAX_ZOOM)),
            zoom_step=float(crop.get("zoom_step", ZOOM_STEP)),
            jpeg_quality=float(crop.get("jpeg_quality", JPEG_QUALITY)),
            fetch_timeout_sec=float(crop.get("fetch_timeout_sec", FETCH_TIMEOUT_SEC)),
        )
        if settings.max_zoom < settings.min_zoom:
            raise SettingsValidationError("crop.max_zoom must not be smaller than crop.min_zoom")
        return settings

    def to_mapping(self) -> dict[str, Any]:
        return {"schema": DEFAULT_SETTINGS["schema"], "crop": asdict(self)}


def load_crop_settings(path: Path | None = None) -> CropSettings:
    """Read settings from *path*, falling back to defaults when it is absent."""

    target = path or default_settings_path()
    payload: dict[str, Any] | None = None
    if target.exists():
        try:
            payload = read_json(target)
        except JsonReadError as exc:
            raise SettingsLoadError(str(exc)) from exc
    try:
        merged = merge_with_defaults(payload)
    except ValidationError as exc:
        raise SettingsValidationError(exc.message) from exc
    return CropSettings.from_mapping(merged)


def save_crop_settings(settings: CropSettings, path: Path | None = None) -> Path:
    target = path or default_settings_path()
    write_json(target, settings.to_mapping())
    return target
