"""Persisted crop settings."""

from .loader import CropSettings, default_settings_path, load_crop_settings, save_crop_settings
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA, merge_with_defaults

__all__ = [
    "CropSettings",
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "default_settings_path",
    "load_crop_settings",
    "merge_with_defaults",
    "save_crop_settings",
]
