"""
Crop session model for state management.

This module holds the crop focal point and zoom factor for the currently
selected image and applies sanitised updates without any UI interaction.
"""

from __future__ import annotations

import re
from typing import Any

from ...config import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_BOUND_TOLERANCE, ZOOM_STEP
from .geometry import (
    DEFAULT_CROP_POSITION,
    CropPosition,
    apply_drag_delta,
    clamp_zoom,
    ensure_crop_position,
)

CropSnapshot = tuple[float, float, float]

# Leading decimal number of the zoom field, read the way a browser number
# parser does: trailing text is ignored and "Infinity" is accepted.
_LEADING_NUMBER = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class CropSessionModel:
    """Manages the crop position and zoom of one image selection."""

    def __init__(
        self,
        *,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
        zoom_step: float = ZOOM_STEP,
    ) -> None:
        if max_zoom < min_zoom:
            raise ValueError("max_zoom must not be smaller than min_zoom")
        self._min_zoom = float(min_zoom)
        self._max_zoom = float(max_zoom)
        self._zoom_step = float(zoom_step)
        self._position: CropPosition = DEFAULT_CROP_POSITION
        self._zoom: float = self._clamp(DEFAULT_ZOOM)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def position(self) -> CropPosition:
        return self._position

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def min_zoom(self) -> float:
        return self._min_zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    def zoom_text(self) -> str:
        """Return the zoom factor formatted for the zoom input field."""

        return f"{self._zoom:.2f}"

    def can_zoom_in(self) -> bool:
        return self._zoom < self._max_zoom - ZOOM_BOUND_TOLERANCE

    def can_zoom_out(self) -> bool:
        return self._zoom > self._min_zoom + ZOOM_BOUND_TOLERANCE

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def reset(self, position: Any = None) -> None:
        """Restore the defaults used when a new image is selected.

        ``position`` lets callers restore a crop stored with an existing
        project; it is clamped like any other input.
        """

        self._position = ensure_crop_position(position)
        self._zoom = self._clamp(DEFAULT_ZOOM)

    def set_crop_position(self, candidate: Any) -> bool:
        """Replace the crop position with the clamped *candidate*.

        Returns
        -------
        bool:
            True if the stored position changed.
        """

        position = ensure_crop_position(candidate)
        changed = position != self._position
        self._position = position
        return changed

    def set_zoom(self, candidate: Any) -> bool:
        """Clamp *candidate* and store it.

        Returns
        -------
        bool:
            True if the clamped zoom differs from the previous value, in which
            case any rasterized output for the old zoom is stale.
        """

        zoom = self._clamp(candidate)
        if zoom == self._zoom:
            return False
        self._zoom = zoom
        return True

    def zoom_in(self) -> bool:
        return self.set_zoom(self._zoom + self._zoom_step)

    def zoom_out(self) -> bool:
        return self.set_zoom(self._zoom - self._zoom_step)

    def commit_zoom_text(self, raw: str) -> bool:
        """Apply the zoom typed by the user.

        Only the leading number counts, so ``"3x"`` reads as 3.  Text without
        one leaves the zoom untouched; callers re-display :meth:`zoom_text`
        so the field reverts to the effective value.  ``"Infinity"`` is not a
        finite zoom and resets to the default like any other non-finite input.
        """

        match = _LEADING_NUMBER.match(str(raw).lstrip())
        if match is None:
            return False
        return self.set_zoom(float(match.group(0).replace("Infinity", "inf")))

    def apply_drag_delta(
        self,
        delta_x: float,
        delta_y: float,
        viewport_width: float,
        viewport_height: float,
    ) -> bool:
        """Pan the crop by a pointer delta measured over the viewport.

        Returns
        -------
        bool:
            True if the position moved.  An unmeasured viewport is a no-op.
        """

        position = apply_drag_delta(
            self._position,
            delta_x,
            delta_y,
            viewport_width,
            viewport_height,
            self._zoom,
        )
        return self.set_crop_position(position)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def create_snapshot(self) -> CropSnapshot:
        """Return a tuple describing the current crop state."""

        return (self._position.x_percent, self._position.y_percent, self._zoom)

    def restore_snapshot(self, snapshot: CropSnapshot) -> None:
        x_percent, y_percent, zoom = snapshot
        self._position = ensure_crop_position((x_percent, y_percent))
        self._zoom = self._clamp(zoom)

    def has_changed(self, snapshot: CropSnapshot) -> bool:
        """Return True when the current crop differs from *snapshot*."""

        current = self.create_snapshot()
        return any(abs(a - b) > 1e-6 for a, b in zip(snapshot, current, strict=True))

    def _clamp(self, value: Any) -> float:
        return clamp_zoom(value, minimum=self._min_zoom, maximum=self._max_zoom)
