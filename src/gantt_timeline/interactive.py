from __future__ import annotations

import logging
from typing import Callable

import matplotlib.pyplot as plt
from matplotlib.backend_bases import MouseButton

from .gestures import PointerAction, PointerEvent
from .measure import MeasureSpec
from .render_chart import DEFAULT_DPI, ChartRenderer, new_chart_figure
from .view import GanttView

logger = logging.getLogger(__name__)

# Mouse wheel stands in for the pinch: one notch zooms by this factor.
SCROLL_ZOOM_BASE = 1.1


class InteractiveChart:
    """
    Hosts a GanttView in a matplotlib window.

    Left-button drags pan the chart and the scroll wheel zooms it. The view is
    mounted for the lifetime of the window; on close its saved state is passed
    to `on_close`.
    """

    def __init__(
        self,
        view: GanttView,
        dpi: int = DEFAULT_DPI,
        on_close: Callable[[bytes], None] | None = None,
    ) -> None:
        self.view = view
        self.on_close = on_close
        self.figure, self.ax = new_chart_figure(view, dpi)
        self.canvas = self.figure.canvas
        self.renderer = ChartRenderer(view)
        self._dragging = False
        self._connections = [
            self.canvas.mpl_connect("button_press_event", self._on_press),
            self.canvas.mpl_connect("motion_notify_event", self._on_motion),
            self.canvas.mpl_connect("button_release_event", self._on_release),
            self.canvas.mpl_connect("scroll_event", self._on_scroll),
            self.canvas.mpl_connect("resize_event", self._on_resize),
            self.canvas.mpl_connect("close_event", self._on_close),
        ]
        view.mount(self)
        self.redraw()

    # ViewHost

    def invalidate(self) -> None:
        self.redraw()

    def request_layout(self) -> None:
        width, height = self.canvas.get_width_height()
        self.view.on_size_changed(*self.view.measure(MeasureSpec.exact(width), MeasureSpec.exact(height)))

    def request_disallow_intercept(self, disallow: bool) -> None:
        # A matplotlib window has no scrolling ancestor to hand the gesture to.
        pass

    def redraw(self) -> None:
        self.renderer.draw(self.ax)
        self.canvas.draw_idle()

    def show(self) -> None:
        plt.show()

    # Event plumbing

    def _pointer_event(self, action: PointerAction, event) -> PointerEvent:
        # Matplotlib measures y upwards from the bottom edge; the view measures it downwards.
        return PointerEvent.single(action, event.x, self.view.height - event.y)

    def _on_press(self, event) -> None:
        if event.button != MouseButton.LEFT:
            return
        self._dragging = True
        self.view.dispatch_pointer_event(self._pointer_event(PointerAction.DOWN, event))

    def _on_motion(self, event) -> None:
        if not self._dragging:
            return
        self.view.dispatch_pointer_event(self._pointer_event(PointerAction.MOVE, event))

    def _on_release(self, event) -> None:
        if not self._dragging:
            return
        self._dragging = False
        self.view.dispatch_pointer_event(self._pointer_event(PointerAction.UP, event))

    def _on_scroll(self, event) -> None:
        self.view.transformer.zoom(SCROLL_ZOOM_BASE**event.step)

    def _on_resize(self, event) -> None:
        logger.debug("Canvas resized to %sx%s", event.width, event.height)
        self.request_layout()

    def _on_close(self, event) -> None:
        for cid in self._connections:
            self.canvas.mpl_disconnect(cid)
        state = self.view.unmount()
        if self.on_close is not None:
            self.on_close(state)
