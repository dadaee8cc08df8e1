"""Controllers coordinating crop widgets and background work."""

from .crop_controller import CropController

__all__ = ["CropController"]
