from __future__ import annotations

import logging
from typing import Iterable, Protocol

from .geometry import ChartLayout
from .gestures import GestureInterpreter, PointerEvent
from .measure import MeasureSpec, resolve_height, resolve_width
from .periods import PeriodIndex, PeriodType
from .saved_state import SavedState
from .style import ChartStyle
from .task_models import Task
from .transform import TransformController

logger = logging.getLogger(__name__)


class ViewHost(Protocol):
    """Callbacks the embedding surface provides while the chart is mounted."""

    def invalidate(self) -> None: ...

    def request_layout(self) -> None: ...

    def request_disallow_intercept(self, disallow: bool) -> None: ...


class GanttView:
    """
    Zoomable timeline chart surface.

    The host mounts it, measures it, forwards pointer events and draws it
    whenever it is invalidated. All state lives here; tasks are read-only input.
    """

    def __init__(self, style: ChartStyle | None = None) -> None:
        self.style = style or ChartStyle()
        self.layout = ChartLayout(self.style)
        self.transformer = TransformController(self.layout, max_scale=self.style.max_scale, on_change=self.invalidate)
        self.gestures = GestureInterpreter(self.transformer)
        self.host: ViewHost | None = None

    @property
    def tasks(self) -> list[Task]:
        return self.layout.tasks

    @tasks.setter
    def tasks(self, tasks: Iterable[Task]) -> None:
        self.layout.set_tasks(tasks)
        logger.debug("Task list replaced with %d tasks", len(self.layout.tasks))
        self.transformer.pan_offset_x = 0.0
        self.transformer.scale_x = 1.0
        self.transformer.rebuild_tasks()
        self.request_layout()
        self.invalidate()

    @property
    def width(self) -> float:
        return self.layout.viewport.width

    @property
    def height(self) -> float:
        return self.layout.viewport.height

    @property
    def period_type(self) -> PeriodType:
        return self.transformer.period_type

    @property
    def period_index(self) -> PeriodIndex:
        return self.layout.period_indexes[self.transformer.period_type]

    # Lifecycle

    def mount(self, host: ViewHost) -> None:
        self.host = host
        self.gestures.scroll_parent = host

    def unmount(self, super_state: bytes = b"") -> bytes:
        """Detach from the host and return the state to hand back on re-creation."""
        state = self.serialize_state(super_state)
        self.host = None
        self.gestures.scroll_parent = None
        return state

    def serialize_state(self, super_state: bytes = b"") -> bytes:
        return SavedState(self.transformer.pan_offset_x, self.transformer.scale_x, super_state).to_bytes()

    def restore_state(self, blob: bytes) -> bytes:
        """Restore pan and scale from `blob`; returns the host's own state bytes."""
        state = SavedState.from_bytes(blob)
        logger.debug("Restoring pan=%.2f scale=%.3f", state.pan_offset_x, state.scale_x)
        self.transformer.restore(state.pan_offset_x, state.scale_x)
        return state.super_state

    # Layout

    def measure(self, width_spec: MeasureSpec, height_spec: MeasureSpec) -> tuple[float, float]:
        width = resolve_width(width_spec, self.layout.content_width(self.transformer.period_type))
        height = resolve_height(height_spec, self.layout.content_height)
        return width, height

    def on_size_changed(self, width: float, height: float) -> None:
        self.layout.viewport.width = width
        self.layout.viewport.height = height
        self.transformer.rebuild_tasks()

    # Input

    def dispatch_pointer_event(self, event: PointerEvent) -> bool:
        return self.gestures.handle(event)

    # Host callbacks

    def invalidate(self) -> None:
        if self.host is not None:
            self.host.invalidate()

    def request_layout(self) -> None:
        if self.host is not None:
            self.host.request_layout()
