"""Square crop engine for project images.

The package is split along the responsibilities of the crop workflow:
- geometry: clamping, drag-to-percent mapping and pixel planning
- model / drag: interactive crop state and pointer gestures
- rasterizer / backends: decoding and rendering the square output
- cache / session: signature-keyed reuse and the submit fallback
"""

from __future__ import annotations

from .backends import CropBackend, DecodedImage, PillowCropBackend
from .cache import CropCache, CropCacheEntry, build_crop_signature
from .drag import CropDragTracker, DragPhase, DragSession
from .geometry import (
    CropPosition,
    SquareCropPlan,
    apply_drag_delta,
    clamp_percent,
    clamp_zoom,
    drag_delta_to_percent,
    ensure_crop_position,
    plan_square_crop,
    preview_image_rect,
)
from .model import CropSessionModel
from .rasterizer import Rasterizer, ResolvedSource
from .session import CropSession, PreparedImage
from .sources import ImageBlob, ImageSource, LocalFileSource, RemoteUrlSource

__all__ = [
    "CropBackend",
    "CropCache",
    "CropCacheEntry",
    "CropDragTracker",
    "CropPosition",
    "CropSession",
    "CropSessionModel",
    "DecodedImage",
    "DragPhase",
    "DragSession",
    "ImageBlob",
    "ImageSource",
    "LocalFileSource",
    "PillowCropBackend",
    "PreparedImage",
    "Rasterizer",
    "RemoteUrlSource",
    "ResolvedSource",
    "SquareCropPlan",
    "apply_drag_delta",
    "build_crop_signature",
    "clamp_percent",
    "clamp_zoom",
    "drag_delta_to_percent",
    "ensure_crop_position",
    "plan_square_crop",
    "preview_image_rect",
]
