"""Interactive square preview used to pan and zoom a project image."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPainterPath, QPaintEvent, QPixmap, QWheelEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from ....core.crop.geometry import CropPosition, preview_image_rect
from ....core.crop.sources import LocalFileSource
from ..controllers.crop_controller import CropController


class CropPreviewWidget(QWidget):
    """Paint the crop preview and forward pointer and wheel input."""

    def __init__(self, controller: CropController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._pixmap: Optional[QPixmap] = None
        self._corner_radius = 24.0
        self._background = QColor("#eef1f6")

        self.setMouseTracking(False)
        self.setMinimumSize(160, 160)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setCursor(Qt.CursorShape.OpenHandCursor)

        controller.sourceChanged.connect(self._handle_source_changed)
        controller.previewDataReady.connect(self._handle_preview_data)
        controller.cropPositionChanged.connect(self._schedule_repaint)
        controller.zoomChanged.connect(self._schedule_repaint)
        controller.draggingChanged.connect(self._handle_dragging_changed)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def set_preview_pixmap(self, pixmap: Optional[QPixmap]) -> None:
        """Display *pixmap*, replacing whatever the current source provided."""

        self._pixmap = pixmap if pixmap is not None and not pixmap.isNull() else None
        self.update()

    def pixmap(self) -> Optional[QPixmap]:
        return self._pixmap

    # ------------------------------------------------------------------
    # QWidget overrides
    # ------------------------------------------------------------------
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._controller.set_viewport_size(self.width(), self.height())

    def paintEvent(self, event: QPaintEvent) -> None:  # pragma: no cover - GUI behaviour
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)

        clip = QPainterPath()
        clip.addRoundedRect(QRectF(self.rect()), self._corner_radius, self._corner_radius)
        painter.setClipPath(clip)
        painter.fillRect(self.rect(), self._background)

        pixmap = self._pixmap
        if pixmap is not None:
            x_percent, y_percent = self._controller.position()
            target = preview_image_rect(
                pixmap.width(),
                pixmap.height(),
                self.width(),
                self.height(),
                CropPosition(x_percent, y_percent),
                self._controller.zoom(),
            )
            if target is not None:
                painter.drawPixmap(QRectF(*target), pixmap, QRectF(pixmap.rect()))
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - GUI behaviour
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        position = event.position()
        if self._controller.press_pointer(_pointer_id(event), position.x(), position.y()):
            self.grabMouse()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - GUI behaviour
        position = event.position()
        if self._controller.move_pointer(_pointer_id(event), position.x(), position.y()):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # pragma: no cover - GUI behaviour
        if event.button() == Qt.MouseButton.LeftButton and self._controller.release_pointer(
            _pointer_id(event)
        ):
            self.releaseMouse()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:  # pragma: no cover - GUI behaviour
        angle = event.angleDelta().y()
        if angle == 0 or not self._controller.has_source():
            super().wheelEvent(event)
            return
        if angle > 0:
            self._controller.zoom_in()
        else:
            self._controller.zoom_out()
        event.accept()

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------
    def _handle_source_changed(self) -> None:
        source = self._controller.session.source
        if isinstance(source, LocalFileSource):
            pixmap = QPixmap()
            pixmap.loadFromData(source.data)
            self.set_preview_pixmap(pixmap)
        else:
            self.set_preview_pixmap(None)

    def _handle_preview_data(self, data: bytes) -> None:
        pixmap = QPixmap()
        pixmap.loadFromData(data)
        self.set_preview_pixmap(pixmap)

    def _handle_dragging_changed(self, dragging: bool) -> None:
        self.setCursor(
            Qt.CursorShape.ClosedHandCursor if dragging else Qt.CursorShape.OpenHandCursor
        )

    def _schedule_repaint(self, *_args) -> None:
        self.update()


def _pointer_id(event: QMouseEvent) -> int:
    """Return the id of the point that generated *event* (0 for plain mice)."""

    if event.pointCount() > 0:
        return int(event.point(0).id())
    return 0
