"""Tests for the crop preview and zoom bar widgets."""

import httpx
import pytest
from PySide6.QtCore import QThreadPool, Qt

from asap.core.crop.session import CropSession
from asap.core.crop.sources import LocalFileSource, RemoteUrlSource
from asap.gui.ui.controllers.crop_controller import CropController
from asap.gui.ui.widgets import CropPreviewWidget, CropZoomBar
from asap.settings import CropSettings


@pytest.fixture
def controller(qtbot):
    pool = QThreadPool()
    yield CropController(CropSession(), thread_pool=pool)
    pool.waitForDone()


def _local(data):
    return LocalFileSource(name="cover.png", size=len(data), last_modified=1, data=data, mime_type="image/png")


def test_zoom_bar_tracks_controller(qtbot, controller, png_bytes):
    bar = CropZoomBar(controller)
    qtbot.addWidget(bar)
    assert bar.zoom_text() == "1.00"
    assert not bar._zoom_in_button.isEnabled()

    controller.select_source(_local(png_bytes))
    assert bar._zoom_in_button.isEnabled()
    assert not bar._zoom_out_button.isEnabled()

    bar._zoom_in_button.click()
    assert bar.zoom_text() == "1.15"
    assert bar._zoom_out_button.isEnabled()


def test_zoom_bar_commits_typed_value(qtbot, controller, png_bytes):
    bar = CropZoomBar(controller)
    qtbot.addWidget(bar)
    controller.select_source(_local(png_bytes))

    bar._zoom_field.setText("3")
    bar._zoom_field.editingFinished.emit()

    assert controller.zoom() == pytest.approx(3.0)
    assert bar.zoom_text() == "3.00"


def test_preview_reports_viewport_and_loads_pixmap(qtbot, controller, png_bytes):
    widget = CropPreviewWidget(controller)
    qtbot.addWidget(widget)
    widget.resize(200, 200)
    widget.show()
    qtbot.waitExposed(widget)

    controller.select_source(_local(png_bytes))
    assert widget.pixmap() is not None
    assert widget.pixmap().width() == 1000

    controller.press_pointer(1, 100, 100)
    assert controller.move_pointer(1, 120, 100)
    assert controller.position()[0] == pytest.approx(40.0)


def test_zoom_bar_reverts_cleared_field(qtbot, controller, png_bytes):
    bar = CropZoomBar(controller)
    qtbot.addWidget(bar)
    controller.select_source(_local(png_bytes))
    controller.set_zoom(2.5)
    field = bar._zoom_field
    assert field.text() == "2.50"

    field.selectAll()
    qtbot.keyClick(field, Qt.Key.Key_Backspace)
    assert field.text() == ""
    qtbot.keyClick(field, Qt.Key.Key_Return)

    assert field.text() == "2.50"
    assert controller.zoom() == pytest.approx(2.5)


def test_zoom_bar_reads_leading_number_from_keystrokes(qtbot, controller, png_bytes):
    bar = CropZoomBar(controller)
    qtbot.addWidget(bar)
    controller.select_source(_local(png_bytes))
    field = bar._zoom_field

    field.selectAll()
    qtbot.keyClicks(field, "3x")
    qtbot.keyClick(field, Qt.Key.Key_Return)

    assert controller.zoom() == pytest.approx(3.0)
    assert field.text() == "3.00"


def test_preview_loads_remote_source(qtbot, png_bytes):
    def handler(request):
        return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})

    pool = QThreadPool()
    session = CropSession.from_settings(CropSettings(), transport=httpx.MockTransport(handler))
    controller = CropController(session, thread_pool=pool)
    widget = CropPreviewWidget(controller)
    qtbot.addWidget(widget)

    controller.select_source(_local(png_bytes))
    with qtbot.waitSignal(controller.previewDataReady, timeout=10000):
        controller.select_source(RemoteUrlSource("https://cdn.example.com/a.png"))
        assert widget.pixmap() is None
    pool.waitForDone()

    assert widget.pixmap() is not None
    assert widget.pixmap().width() == 1000
