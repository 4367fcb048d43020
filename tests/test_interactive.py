import datetime as dt
from types import SimpleNamespace

import matplotlib.pyplot as plt
import pytest
from matplotlib.backend_bases import MouseButton

from gantt_timeline.gestures import PointerAction
from gantt_timeline.interactive import SCROLL_ZOOM_BASE, InteractiveChart
from gantt_timeline.saved_state import SavedState
from gantt_timeline.style import ChartStyle
from gantt_timeline.task_models import Task
from gantt_timeline.view import GanttView


def _view():
    view = GanttView(ChartStyle(period_width=100, row_height=48))
    view.tasks = [
        Task("Task1", dt.date(2024, 1, 1), dt.date(2024, 2, 1)),
        Task("Task2", dt.date(2024, 1, 15), dt.date(2024, 3, 1)),
    ]
    view.on_size_changed(200.0, 200.0)
    return view


def _mouse(x, y, button=MouseButton.LEFT):
    return SimpleNamespace(x=x, y=y, button=button)


@pytest.fixture
def closed_states():
    return []


@pytest.fixture
def chart(closed_states):
    chart = InteractiveChart(_view(), on_close=closed_states.append)
    yield chart
    plt.close(chart.figure)


def test_chart_mounts_view_and_draws(chart):
    assert chart.view.host is chart
    assert "Task1" in [t.get_text() for t in chart.ax.texts]


def test_pointer_y_is_measured_from_top(chart):
    event = chart._pointer_event(PointerAction.DOWN, _mouse(40, 150))

    assert event.action is PointerAction.DOWN
    assert (event.primary.x, event.primary.y) == (40, 200 - 150)


def test_left_drag_pans_chart(chart):
    chart._on_press(_mouse(100, 150))
    chart._on_motion(_mouse(70, 150))

    assert chart.view.transformer.pan_offset_x == -30

    chart._on_release(_mouse(70, 150))
    chart._on_motion(_mouse(20, 150))

    assert not chart._dragging
    assert chart.view.transformer.pan_offset_x == -30


def test_motion_without_left_press_is_ignored(chart):
    chart._on_press(_mouse(100, 150, button=MouseButton.RIGHT))
    chart._on_motion(_mouse(70, 150))

    assert not chart._dragging
    assert chart.view.transformer.pan_offset_x == 0


def test_scroll_zooms_by_one_step_per_notch(chart):
    chart._on_scroll(SimpleNamespace(step=1))
    assert chart.view.transformer.scale_x == pytest.approx(SCROLL_ZOOM_BASE)

    chart._on_scroll(SimpleNamespace(step=-1))
    assert chart.view.transformer.scale_x == pytest.approx(1.0)


def test_resize_remeasures_to_canvas_size(chart):
    chart.figure.set_size_inches(3, 2)
    width, height = chart.canvas.get_width_height()

    chart._on_resize(SimpleNamespace(width=width, height=height))

    assert (chart.view.width, chart.view.height) == (width, height)


def test_close_disconnects_and_hands_back_state(chart, closed_states):
    chart._on_press(_mouse(100, 150))
    chart._on_motion(_mouse(70, 150))
    chart._on_scroll(SimpleNamespace(step=1))
    pan, scale = chart.view.transformer.pan_offset_x, chart.view.transformer.scale_x

    chart._on_close(SimpleNamespace())

    assert chart.view.host is None
    (blob,) = closed_states
    state = SavedState.from_bytes(blob)
    assert (state.pan_offset_x, state.scale_x) == (pan, scale)
    registered = chart.canvas.callbacks.callbacks
    for cid in chart._connections:
        assert all(cid not in handlers for handlers in registered.values())
