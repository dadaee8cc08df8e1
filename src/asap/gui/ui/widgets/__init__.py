"""Reusable Qt widgets for the project image crop UI."""

from .crop_preview import CropPreviewWidget
from .crop_zoom_bar import CropZoomBar

__all__ = [
    "CropPreviewWidget",
    "CropZoomBar",
]
