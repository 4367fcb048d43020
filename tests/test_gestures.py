import datetime as dt

import pytest

from gantt_timeline.gestures import (
    GestureState,
    PinchDetector,
    Pointer,
    PointerAction,
    PointerEvent,
)
from gantt_timeline.task_models import Task
from gantt_timeline.view import GanttView


class _Host:
    def __init__(self):
        self.disallow_calls = []
        self.invalidations = 0
        self.layout_requests = 0

    def invalidate(self):
        self.invalidations += 1

    def request_layout(self):
        self.layout_requests += 1

    def request_disallow_intercept(self, disallow):
        self.disallow_calls.append(disallow)


def _view(width=200.0, height=200.0):
    view = GanttView()
    view.tasks = [
        Task("Task1", dt.date(2024, 1, 1), dt.date(2024, 2, 1)),
        Task("Task2", dt.date(2024, 1, 15), dt.date(2024, 3, 1)),
    ]
    view.on_size_changed(width, height)
    host = _Host()
    view.mount(host)
    return view, host


def _pinch(action, span, pointer_ids=(0, 1)):
    return PointerEvent(action, (Pointer(pointer_ids[0], 0, 50), Pointer(pointer_ids[1], span, 50)))


def test_drag_pans_chart_horizontally():
    view, host = _view()

    assert view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 100, 10))
    assert view.gestures.state is GestureState.PANNING
    assert view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 70, 12))

    assert view.transformer.pan_offset_x == -30
    assert host.disallow_calls[-1] is True


def test_drag_is_unhandled_when_content_fits():
    view, _ = _view(width=400)

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 100, 10))
    handled = view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 50, 10))

    assert handled is False
    assert view.transformer.pan_offset_x == 0


def test_vertical_movement_leaves_gesture_to_scroll_parent():
    view, host = _view()
    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 100, 100))
    host.disallow_calls.clear()

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 99, 160))

    assert host.disallow_calls == []


def test_moves_from_a_different_pointer_are_ignored():
    view, _ = _view()
    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 100, 10, pointer_id=0))

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 50, 10, pointer_id=1))
    assert view.transformer.pan_offset_x == 0

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 40, 10, pointer_id=1))
    assert view.transformer.pan_offset_x == -10


def test_two_pointers_pinch_zoom():
    view, _ = _view()

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 0, 50))
    view.dispatch_pointer_event(_pinch(PointerAction.POINTER_DOWN, 100))
    assert view.gestures.state is GestureState.PINCHING
    assert view.transformer.scale_x == 1.0

    view.dispatch_pointer_event(_pinch(PointerAction.MOVE, 120))

    assert view.transformer.scale_x == pytest.approx(1.2)


def test_pinch_factors_saturate_at_max_scale():
    view, _ = _view()
    spans = [100, 120, 144, 172.8, 207.36, 248.832]

    view.dispatch_pointer_event(_pinch(PointerAction.POINTER_DOWN, spans[0]))
    for span in spans[1:4]:
        view.dispatch_pointer_event(_pinch(PointerAction.MOVE, span))
    assert view.transformer.scale_x == pytest.approx(1.728)

    for span in spans[4:]:
        view.dispatch_pointer_event(_pinch(PointerAction.MOVE, span))
    assert view.transformer.scale_x == 2.0


def test_last_finger_after_pinch_reanchors_without_jump():
    view, _ = _view()
    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 150, 50))
    view.dispatch_pointer_event(_pinch(PointerAction.POINTER_DOWN, 100))
    view.dispatch_pointer_event(_pinch(PointerAction.MOVE, 100))

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, 0, 50))
    assert view.transformer.pan_offset_x == 0
    assert view.gestures.state is GestureState.PANNING

    view.dispatch_pointer_event(PointerEvent.single(PointerAction.MOVE, -20, 50))
    assert view.transformer.pan_offset_x == -20


def test_release_returns_to_idle():
    view, _ = _view()
    view.dispatch_pointer_event(PointerEvent.single(PointerAction.DOWN, 100, 10))

    handled = view.dispatch_pointer_event(PointerEvent.single(PointerAction.UP, 100, 10))

    assert handled is False
    assert view.gestures.state is GestureState.IDLE


def test_pinch_span_is_twice_mean_distance_from_focus():
    pointers = (Pointer(0, 0, 0), Pointer(1, 30, 40))

    assert PinchDetector.span(pointers) == pytest.approx(50)


def test_pinch_detector_needs_a_baseline():
    detector = PinchDetector()

    assert detector.update(_pinch(PointerAction.MOVE, 100)) is None
    assert detector.update(_pinch(PointerAction.MOVE, 50)) == pytest.approx(0.5)
    assert detector.update(_pinch(PointerAction.POINTER_UP, 80)) is None
