"""
Pure geometry helpers for the square crop engine.

The functions here translate between the normalised crop state (percentages
and a zoom factor) and pixel space.  They are free of any Qt or Pillow
dependency so the same maths drives the interactive preview, the rasterizer
and the tests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ...config import (
    DEFAULT_CROP_PERCENT,
    DEFAULT_ZOOM,
    MAX_CROP_PERCENT,
    MAX_ZOOM,
    MIN_CROP_PERCENT,
    MIN_ZOOM,
)


@dataclass(frozen=True)
class CropPosition:
    """Focal point of the square crop expressed as percentages."""

    x_percent: float = DEFAULT_CROP_PERCENT
    y_percent: float = DEFAULT_CROP_PERCENT

    def as_tuple(self) -> tuple[float, float]:
        return (self.x_percent, self.y_percent)


DEFAULT_CROP_POSITION = CropPosition()


def js_round(value: float) -> int:
    """Round half up, matching the browser canvas maths the crops must reproduce."""

    return int(math.floor(value + 0.5))


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def clamp_percent(value: Any) -> float:
    """Clamp *value* into ``[0, 100]``; non-numeric and NaN inputs centre to 50."""

    numeric = _to_float(value)
    if numeric is None or math.isnan(numeric):
        return DEFAULT_CROP_PERCENT
    return min(MAX_CROP_PERCENT, max(MIN_CROP_PERCENT, numeric))


def clamp_zoom(value: Any, *, minimum: float = MIN_ZOOM, maximum: float = MAX_ZOOM) -> float:
    """Clamp *value* into ``[minimum, maximum]``; non-finite input resets to 1.0."""

    numeric = _to_float(value)
    if numeric is None or not math.isfinite(numeric):
        numeric = DEFAULT_ZOOM
    return min(maximum, max(minimum, numeric))


def ensure_crop_position(candidate: Any) -> CropPosition:
    """Return a clamped :class:`CropPosition` for *candidate*.

    ``candidate`` may be ``None``, an existing :class:`CropPosition`, a
    ``(x, y)`` pair or a mapping with ``xPercent``/``yPercent`` keys as stored
    alongside persisted projects.
    """

    if candidate is None:
        return DEFAULT_CROP_POSITION
    if isinstance(candidate, CropPosition):
        x, y = candidate.x_percent, candidate.y_percent
    elif isinstance(candidate, dict):
        x = candidate.get("xPercent", candidate.get("x_percent"))
        y = candidate.get("yPercent", candidate.get("y_percent"))
    else:
        try:
            x, y = candidate
        except (TypeError, ValueError):
            return DEFAULT_CROP_POSITION
    return CropPosition(clamp_percent(x), clamp_percent(y))


def drag_delta_to_percent(
    delta_x: float,
    delta_y: float,
    viewport_width: float,
    viewport_height: float,
    zoom: float,
) -> tuple[float, float] | None:
    """Convert a pointer delta in pixels into crop percentage deltas.

    Returns ``None`` while the viewport has not been measured yet so callers
    skip the update instead of dividing by zero.
    """

    if viewport_width <= 0 or viewport_height <= 0:
        return None
    scale = clamp_zoom(zoom, maximum=math.inf)
    return (
        (float(delta_x) / float(viewport_width)) * (100.0 / scale),
        (float(delta_y) / float(viewport_height)) * (100.0 / scale),
    )


def apply_drag_delta(
    position: CropPosition,
    delta_x: float,
    delta_y: float,
    viewport_width: float,
    viewport_height: float,
    zoom: float,
) -> CropPosition:
    """Return *position* panned by a pointer delta.

    Dragging the image to the right reveals content on its left, so the
    percentages move against the pointer.
    """

    delta = drag_delta_to_percent(delta_x, delta_y, viewport_width, viewport_height, zoom)
    if delta is None:
        return position
    delta_percent_x, delta_percent_y = delta
    return CropPosition(
        clamp_percent(position.x_percent - delta_percent_x),
        clamp_percent(position.y_percent - delta_percent_y),
    )


@dataclass(frozen=True)
class SquareCropPlan:
    """Pixel geometry describing how a square crop samples its source."""

    square_size: int
    source_side: int
    overflow_x: int
    overflow_y: int
    offset_x: int
    offset_y: int

    @property
    def source_box(self) -> tuple[int, int, int, int]:
        """Return the sampled region as ``(left, top, right, bottom)``."""

        return (
            self.offset_x,
            self.offset_y,
            self.offset_x + self.source_side,
            self.offset_y + self.source_side,
        )


def plan_square_crop(
    width: int,
    height: int,
    position: CropPosition,
    zoom: float,
) -> SquareCropPlan:
    """Compute the source region and output size for a square crop.

    Parameters
    ----------
    width, height:
        Native pixel dimensions of the decoded source.
    position:
        Crop focal point; clamped again here so stale callers cannot push the
        region outside the bitmap.
    zoom:
        Magnification; the sampled side shrinks as the zoom grows while the
        output keeps the ``min(width, height)`` resolution.
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image dimensions {width}x{height}")

    normalised_zoom = clamp_zoom(zoom, maximum=math.inf)
    square_size = min(int(width), int(height))
    source_side = max(1, js_round(square_size / normalised_zoom))
    overflow_x = max(int(width) - source_side, 0)
    overflow_y = max(int(height) - source_side, 0)

    x_percent = clamp_percent(position.x_percent)
    y_percent = clamp_percent(position.y_percent)
    offset_x = max(0, min(overflow_x, js_round(x_percent / 100.0 * overflow_x)))
    offset_y = max(0, min(overflow_y, js_round(y_percent / 100.0 * overflow_y)))

    return SquareCropPlan(
        square_size=square_size,
        source_side=source_side,
        overflow_x=overflow_x,
        overflow_y=overflow_y,
        offset_x=offset_x,
        offset_y=offset_y,
    )


def preview_image_rect(
    image_width: float,
    image_height: float,
    viewport_width: float,
    viewport_height: float,
    position: CropPosition,
    zoom: float,
) -> tuple[float, float, float, float] | None:
    """Return the on-screen ``(x, y, width, height)`` of the preview image.

    The preview mimics a cover-fitted image positioned at the crop focal
    point and scaled around that same point.  It is only an approximation of
    :func:`plan_square_crop`; the rasterized output is authoritative.
    """

    if image_width <= 0 or image_height <= 0:
        return None
    if viewport_width <= 0 or viewport_height <= 0:
        return None

    cover_scale = max(viewport_width / image_width, viewport_height / image_height)
    fitted_w = image_width * cover_scale
    fitted_h = image_height * cover_scale

    fx = clamp_percent(position.x_percent) / 100.0
    fy = clamp_percent(position.y_percent) / 100.0
    left = (viewport_width - fitted_w) * fx
    top = (viewport_height - fitted_h) * fy

    scale = clamp_zoom(zoom, maximum=math.inf)
    origin_x = viewport_width * fx
    origin_y = viewport_height * fy
    return (
        origin_x + (left - origin_x) * scale,
        origin_y + (top - origin_y) * scale,
        fitted_w * scale,
        fitted_h * scale,
    )
