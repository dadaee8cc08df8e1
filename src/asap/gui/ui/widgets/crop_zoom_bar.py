"""Zoom buttons and text field bound to a :class:`CropController`."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QHBoxLayout, QLineEdit, QToolButton, QWidget

from ..controllers.crop_controller import CropController


class CropZoomBar(QWidget):
    """Minus button, editable zoom factor and plus button."""

    def __init__(self, controller: CropController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._controller = controller

        self._zoom_out_button = QToolButton(self)
        self._zoom_out_button.setText("−")
        self._zoom_out_button.setToolTip("Zoom out")

        self._zoom_in_button = QToolButton(self)
        self._zoom_in_button.setText("+")
        self._zoom_in_button.setToolTip("Zoom in")

        self._zoom_field = QLineEdit(self)
        self._zoom_field.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._zoom_field.setFixedWidth(64)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)
        layout.addWidget(self._zoom_out_button)
        layout.addWidget(self._zoom_field)
        layout.addWidget(self._zoom_in_button)

        self._zoom_out_button.clicked.connect(controller.zoom_out)
        self._zoom_in_button.clicked.connect(controller.zoom_in)
        self._zoom_field.editingFinished.connect(self._commit_text)

        controller.zoomTextChanged.connect(self._zoom_field.setText)
        controller.zoomChanged.connect(self._refresh_enabled)
        controller.sourceChanged.connect(self._refresh_enabled)

        self._zoom_field.setText(controller.zoom_text())
        self._refresh_enabled()

    def zoom_text(self) -> str:
        return self._zoom_field.text()

    def _commit_text(self) -> None:
        self._controller.commit_zoom_text(self._zoom_field.text())

    def _refresh_enabled(self, *_args) -> None:
        has_source = self._controller.has_source()
        self._zoom_field.setEnabled(has_source)
        self._zoom_in_button.setEnabled(self._controller.can_zoom_in())
        self._zoom_out_button.setEnabled(self._controller.can_zoom_out())
