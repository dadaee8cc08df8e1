"""Pointer drag tracking for panning the crop preview."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DragPhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class DragSession:
    """State captured for a single press-move-release gesture."""

    pointer_id: int
    last_x: float
    last_y: float


class CropDragTracker:
    """Finite state machine turning pointer samples into pan deltas.

    A :class:`DragSession` is created on press and discarded on release or
    cancel, so no state leaks from one gesture into the next.
    """

    def __init__(self) -> None:
        self._session: DragSession | None = None

    @property
    def phase(self) -> DragPhase:
        return DragPhase.IDLE if self._session is None else DragPhase.DRAGGING

    @property
    def session(self) -> DragSession | None:
        return self._session

    def is_dragging(self) -> bool:
        return self._session is not None

    def press(self, pointer_id: int, x: float, y: float) -> None:
        """Start a gesture, replacing any gesture that never saw its release."""

        self._session = DragSession(int(pointer_id), float(x), float(y))

    def move(self, pointer_id: int, x: float, y: float) -> tuple[float, float] | None:
        """Return the delta since the previous sample of the active pointer.

        ``None`` is returned when idle, for foreign pointers and for samples
        that did not move; those leave the captured coordinates untouched.
        """

        session = self._session
        if session is None or session.pointer_id != int(pointer_id):
            return None
        delta_x = float(x) - session.last_x
        delta_y = float(y) - session.last_y
        if delta_x == 0 and delta_y == 0:
            return None
        session.last_x = float(x)
        session.last_y = float(y)
        return (delta_x, delta_y)

    def release(self, pointer_id: int) -> bool:
        """End the gesture owned by *pointer_id*; returns True if one ended."""

        session = self._session
        if session is None or session.pointer_id != int(pointer_id):
            return False
        self._session = None
        return True

    cancel = release

    def reset(self) -> None:
        self._session = None
