"""Controller that binds crop input, state and rendering together."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from ....core.crop.session import CropSession, PreparedImage
from ....core.crop.sources import ImageBlob, ImageSource, LocalFileSource, RemoteUrlSource
from ....core.crop.drag import CropDragTracker
from ....utils.logging import get_logger
from ..tasks.crop_render_worker import CropRenderWorker
from ..tasks.preview_fetch_worker import PreviewFetchWorker

logger = get_logger()


class CropController(QObject):
    """Expose the crop session to widgets and run renders off the GUI thread.

    Local files carry their bytes, so widgets decode them directly on
    :attr:`sourceChanged`.  Remote sources are downloaded through the
    session's fetcher in the background and delivered by
    :attr:`previewDataReady`; hosts never need to load them themselves.
    """

    cropPositionChanged = Signal(float, float)
    """Emitted with the new ``(x_percent, y_percent)`` focal point."""

    zoomChanged = Signal(float)
    zoomTextChanged = Signal(str)
    draggingChanged = Signal(bool)
    sourceChanged = Signal()

    imagePrepared = Signal(object)
    """Emitted with a :class:`PreparedImage` once a submit request resolves."""

    renderFailed = Signal(str)

    previewDataReady = Signal(object)
    """Emitted with the bytes of a remote source once they are downloaded."""

    previewFailed = Signal(str)

    def __init__(
        self,
        session: CropSession | None = None,
        *,
        thread_pool: QThreadPool | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._session = session or CropSession()
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._drag = CropDragTracker()
        self._viewport_size: tuple[float, float] = (0.0, 0.0)
        self._pending_signature: str | None = None
        # Workers must stay referenced until their signals have been delivered.
        self._active_workers: dict[str, CropRenderWorker] = {}
        self._pending_preview_url: str | None = None
        self._preview_workers: dict[str, PreviewFetchWorker] = {}

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def session(self) -> CropSession:
        return self._session

    def position(self) -> tuple[float, float]:
        return self._session.model.position.as_tuple()

    def zoom(self) -> float:
        return self._session.model.zoom

    def zoom_text(self) -> str:
        return self._session.model.zoom_text()

    def has_source(self) -> bool:
        return self._session.has_source()

    def can_zoom_in(self) -> bool:
        return self.has_source() and self._session.model.can_zoom_in()

    def can_zoom_out(self) -> bool:
        return self.has_source() and self._session.model.can_zoom_out()

    def is_dragging(self) -> bool:
        return self._drag.is_dragging()

    def is_rendering(self) -> bool:
        return self._pending_signature is not None

    # ------------------------------------------------------------------
    # Source selection
    # ------------------------------------------------------------------
    def select_file(self, path: Path) -> None:
        self.select_source(LocalFileSource.from_path(path))

    def select_url(self, url: str, *, crop_position: Any = None) -> None:
        self.select_source(RemoteUrlSource(url), crop_position=crop_position)

    def select_source(self, source: ImageSource, *, crop_position: Any = None) -> None:
        """Replace the current image and reset the interaction to idle."""

        self._end_drag()
        self._pending_signature = None
        self._pending_preview_url = None
        self._session.select_source(source, crop_position=crop_position)
        self.sourceChanged.emit()
        self._emit_state()
        if isinstance(source, RemoteUrlSource):
            self._request_remote_preview(source.url)

    def clear_source(self) -> None:
        self._end_drag()
        self._pending_signature = None
        self._pending_preview_url = None
        self._session.clear_source()
        self.sourceChanged.emit()
        self._emit_state()

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------
    def set_viewport_size(self, width: float, height: float) -> None:
        self._viewport_size = (max(0.0, float(width)), max(0.0, float(height)))

    def press_pointer(self, pointer_id: int, x: float, y: float) -> bool:
        if not self.has_source():
            return False
        was_dragging = self._drag.is_dragging()
        self._drag.press(pointer_id, x, y)
        if not was_dragging:
            self.draggingChanged.emit(True)
        return True

    def move_pointer(self, pointer_id: int, x: float, y: float) -> bool:
        delta = self._drag.move(pointer_id, x, y)
        if delta is None:
            return False
        width, height = self._viewport_size
        snapshot = self._session.model.create_snapshot()
        self._session.apply_drag_delta(delta[0], delta[1], width, height)
        return self._emit_if_changed(snapshot)

    def release_pointer(self, pointer_id: int) -> bool:
        if not self._drag.release(pointer_id):
            return False
        self.draggingChanged.emit(False)
        return True

    def cancel_pointer(self, pointer_id: int) -> bool:
        if not self._drag.cancel(pointer_id):
            return False
        self.draggingChanged.emit(False)
        return True

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------
    @Slot()
    def zoom_in(self) -> None:
        snapshot = self._session.model.create_snapshot()
        self._session.zoom_in()
        self._emit_if_changed(snapshot)

    @Slot()
    def zoom_out(self) -> None:
        snapshot = self._session.model.create_snapshot()
        self._session.zoom_out()
        self._emit_if_changed(snapshot)

    def set_zoom(self, value: float) -> None:
        snapshot = self._session.model.create_snapshot()
        self._session.set_zoom(value)
        self._emit_if_changed(snapshot)

    @Slot(str)
    def commit_zoom_text(self, raw: str) -> None:
        """Apply typed zoom text; the displayed text is always re-synchronised."""

        snapshot = self._session.model.create_snapshot()
        self._session.commit_zoom_text(raw)
        if not self._emit_if_changed(snapshot):
            self.zoomTextChanged.emit(self.zoom_text())

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def prepare_for_submit(self) -> PreparedImage:
        """Synchronously produce the image for the project-save flow."""

        return self._session.prepare_for_submit()

    def request_prepared_image(self) -> None:
        """Resolve the submit image asynchronously and emit :attr:`imagePrepared`.

        Cache hits and image-less forms resolve immediately; otherwise a
        worker renders the crop for the state current at call time.
        """

        session = self._session
        source = session.source
        if source is None:
            self.imagePrepared.emit(PreparedImage(file=None, preview_url=None))
            return

        cached = session.cached_output()
        if cached is not None:
            self.imagePrepared.emit(session.build_prepared(cached))
            return

        signature = session.current_signature()
        if self._pending_signature == signature:
            return
        self._pending_signature = signature
        worker = CropRenderWorker(
            session.rasterizer,
            source,
            session.model.position,
            session.model.zoom,
            signature,
        )
        worker.signals.finished.connect(self._handle_render_finished)
        worker.signals.failed.connect(self._handle_render_failed)
        self._active_workers[signature] = worker
        self._thread_pool.start(worker)

    @Slot(str, object)
    def _handle_render_finished(self, signature: str, output: ImageBlob) -> None:
        self._active_workers.pop(signature, None)
        if signature != self._pending_signature:
            logger.debug("Ignoring crop render superseded by newer state: %s", signature)
            return
        self._pending_signature = None
        # The crop may have moved since the request; the output still answers
        # the submit that asked for it but is only cached while current.
        self._session.accept_result(signature, output)
        self.imagePrepared.emit(self._session.build_prepared(output))

    @Slot(str, str)
    def _handle_render_failed(self, signature: str, message: str) -> None:
        self._active_workers.pop(signature, None)
        if signature != self._pending_signature:
            return
        self._pending_signature = None
        logger.error("Failed to crop project image: %s", message)
        self.renderFailed.emit(message)
        self.imagePrepared.emit(self._session.fallback(message))

    # ------------------------------------------------------------------
    # Remote previews
    # ------------------------------------------------------------------
    def _request_remote_preview(self, url: str) -> None:
        self._pending_preview_url = url
        worker = PreviewFetchWorker(self._session.rasterizer.fetcher, url)
        worker.signals.loaded.connect(self._handle_preview_loaded)
        worker.signals.failed.connect(self._handle_preview_failed)
        self._preview_workers[url] = worker
        self._thread_pool.start(worker)

    @Slot(str, object)
    def _handle_preview_loaded(self, url: str, data: bytes) -> None:
        self._preview_workers.pop(url, None)
        if url != self._pending_preview_url:
            return
        self._pending_preview_url = None
        self.previewDataReady.emit(data)

    @Slot(str, str)
    def _handle_preview_failed(self, url: str, message: str) -> None:
        self._preview_workers.pop(url, None)
        if url != self._pending_preview_url:
            return
        self._pending_preview_url = None
        self.previewFailed.emit(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _end_drag(self) -> None:
        if self._drag.is_dragging():
            self._drag.reset()
            self.draggingChanged.emit(False)

    def _emit_if_changed(self, snapshot: tuple[float, float, float]) -> bool:
        model = self._session.model
        if not model.has_changed(snapshot):
            return False
        x_percent, y_percent, zoom = snapshot
        if (x_percent, y_percent) != model.position.as_tuple():
            self.cropPositionChanged.emit(*model.position.as_tuple())
        if zoom != model.zoom:
            self.zoomChanged.emit(model.zoom)
            self.zoomTextChanged.emit(model.zoom_text())
        return True

    def _emit_state(self) -> None:
        model = self._session.model
        self.cropPositionChanged.emit(*model.position.as_tuple())
        self.zoomChanged.emit(model.zoom)
        self.zoomTextChanged.emit(model.zoom_text())
