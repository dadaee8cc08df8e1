"""Tests for the pointer drag state machine."""

from asap.core.crop.drag import CropDragTracker, DragPhase


def test_press_move_release_cycle():
    tracker = CropDragTracker()
    assert tracker.phase is DragPhase.IDLE

    tracker.press(1, 10, 20)
    assert tracker.phase is DragPhase.DRAGGING
    assert tracker.move(1, 15, 18) == (5.0, -2.0)
    assert tracker.move(1, 20, 18) == (5.0, 0.0)
    assert tracker.session.last_x == 20.0

    assert tracker.release(1)
    assert tracker.phase is DragPhase.IDLE
    assert tracker.session is None


def test_move_while_idle_is_ignored():
    tracker = CropDragTracker()
    assert tracker.move(1, 5, 5) is None


def test_foreign_pointer_is_ignored():
    tracker = CropDragTracker()
    tracker.press(1, 0, 0)
    assert tracker.move(2, 50, 50) is None
    assert not tracker.release(2)
    assert tracker.is_dragging()
    assert tracker.move(1, 1, 1) == (1.0, 1.0)


def test_zero_length_move_keeps_anchor():
    tracker = CropDragTracker()
    tracker.press(7, 3, 4)
    assert tracker.move(7, 3, 4) is None
    assert tracker.move(7, 4, 4) == (1.0, 0.0)


def test_cancel_ends_gesture():
    tracker = CropDragTracker()
    tracker.press(3, 0, 0)
    assert tracker.cancel(3)
    assert not tracker.is_dragging()
    assert not tracker.cancel(3)


def test_new_press_starts_fresh_session():
    tracker = CropDragTracker()
    tracker.press(1, 0, 0)
    tracker.press(2, 100, 100)
    assert tracker.session.pointer_id == 2
    assert tracker.move(2, 110, 100) == (10.0, 0.0)
