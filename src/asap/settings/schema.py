"""Schema helpers for the crop settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import FETCH_TIMEOUT_SEC, JPEG_QUALITY, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "asap/settings.schema.json",
    "type": "object",
    "required": ["schema", "crop"],
    "properties": {
        "schema": {"const": "asap/settings@1"},
        "crop": {
            "type": "object",
            "properties": {
                "min_zoom": {"type": "number", "minimum": 1},
                "max_zoom": {"type": "number", "minimum": 1},
                "zoom_step": {"type": "number", "exclusiveMinimum": 0},
                "jpeg_quality": {"type": "number", "exclusiveMinimum": 0, "maximum": 1},
                "fetch_timeout_sec": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "asap/settings@1",
    "crop": {
        "min_zoom": MIN_ZOOM,
        "max_zoom": MAX_ZOOM,
        "zoom_step": ZOOM_STEP,
        "jpeg_quality": JPEG_QUALITY,
        "fetch_timeout_sec": FETCH_TIMEOUT_SEC,
    },
}

_VALIDATOR = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(payload: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay *payload* on the defaults and validate the result.

    Raises ``jsonschema.ValidationError`` for the first schema violation.
    """

    merged = deepcopy(DEFAULT_SETTINGS)
    if payload:
        for key, value in payload.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key].update(value)
            else:
                merged[key] = value
    _VALIDATOR.validate(merged)
    return merged
