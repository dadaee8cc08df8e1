"""Worker that rasterizes square crops on a background thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ....core.crop.geometry import CropPosition
from ....core.crop.rasterizer import Rasterizer
from ....core.crop.sources import ImageSource
from ....errors import CropError

LOGGER = logging.getLogger(__name__)


class CropRenderSignals(QObject):
    """Signals emitted by :class:`CropRenderWorker`."""

    finished = Signal(str, object)
    """Emitted with the crop signature and the resulting ``ImageBlob``."""

    failed = Signal(str, str)
    """Emitted with the crop signature and a readable error message."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)


class CropRenderWorker(QRunnable):
    """Run :meth:`Rasterizer.rasterize` inside a :class:`QThreadPool`."""

    def __init__(
        self,
        rasterizer: Rasterizer,
        source: ImageSource,
        position: CropPosition,
        zoom: float,
        signature: str,
    ) -> None:
        super().__init__()
        self.setAutoDelete(True)
        self._rasterizer = rasterizer
        self._source = source
        self._position = position
        self._zoom = float(zoom)
        self._signature = signature
        self.signals = CropRenderSignals()

    @property
    def signature(self) -> str:
        return self._signature

    def run(self) -> None:  # type: ignore[override]
        """Render the crop and report the outcome keyed by signature."""

        try:
            output = self._rasterizer.rasterize(self._source, self._position, self._zoom)
        except CropError as exc:
            LOGGER.warning("Crop render failed for %s: %s", self._signature, exc)
            self.signals.failed.emit(self._signature, str(exc))
            return
        except Exception as exc:  # pragma: no cover - unexpected failure
            LOGGER.exception("Unexpected crop render failure")
            self.signals.failed.emit(self._signature, str(exc))
            return
        self.signals.finished.emit(self._signature, output)


__all__ = ["CropRenderSignals", "CropRenderWorker"]
