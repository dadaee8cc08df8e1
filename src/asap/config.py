"""Default configuration values for the ASAP crop engine."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Crop interaction
# ---------------------------------------------------------------------------

# The crop centre is stored as percentages of the overflow range so the value
# stays meaningful regardless of the source resolution.
DEFAULT_CROP_PERCENT: Final[float] = 50.0
MIN_CROP_PERCENT: Final[float] = 0.0
MAX_CROP_PERCENT: Final[float] = 100.0

DEFAULT_ZOOM: Final[float] = 1.0
MIN_ZOOM: Final[float] = 1.0
MAX_ZOOM: Final[float] = 10.0

# Zoom buttons and the mouse wheel nudge the factor by this amount.
ZOOM_STEP: Final[float] = 0.15

# Bounds checks for enabling the zoom buttons tolerate float drift from
# repeated stepping.
ZOOM_BOUND_TOLERANCE: Final[float] = 1e-3

# Precision used when a crop value becomes part of a cache signature.
SIGNATURE_PRECISION: Final[int] = 3

# ---------------------------------------------------------------------------
# Rasterization
# ---------------------------------------------------------------------------

CROPPED_NAME_SUFFIX: Final[str] = "-square"
FALLBACK_IMAGE_NAME: Final[str] = "project-image"
DEFAULT_SOURCE_MIME: Final[str] = "image/png"
SUPPORTED_OUTPUT_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {"image/png", "image/jpeg", "image/webp"}
)
JPEG_QUALITY: Final[float] = 0.92

# ---------------------------------------------------------------------------
# Remote sources and uploads
# ---------------------------------------------------------------------------

FETCH_TIMEOUT_SEC: Final[float] = 15.0
PROJECT_IMAGES_BUCKET: Final[str] = "project-images"
PROJECT_IMAGES_PREFIX: Final[str] = "projects"
UPLOAD_CACHE_CONTROL_SEC: Final[int] = 3600
FALLBACK_FILE_EXTENSION: Final[str] = "dat"
