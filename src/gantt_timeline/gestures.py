from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .transform import TransformController


class PointerAction(Enum):
    DOWN = "down"
    POINTER_DOWN = "pointer_down"
    MOVE = "move"
    POINTER_UP = "pointer_up"
    UP = "up"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Pointer:
    id: int
    x: float
    y: float


@dataclass(frozen=True)
class PointerEvent:
    """Snapshot of every pointer currently touching the surface."""

    action: PointerAction
    pointers: tuple[Pointer, ...]

    @classmethod
    def single(cls, action: PointerAction, x: float, y: float, pointer_id: int = 0) -> "PointerEvent":
        return cls(action, (Pointer(pointer_id, x, y),))

    @property
    def pointer_count(self) -> int:
        return len(self.pointers)

    @property
    def primary(self) -> Pointer:
        return self.pointers[0]


class ScrollParent(Protocol):
    def request_disallow_intercept(self, disallow: bool) -> None: ...


class GestureState(Enum):
    IDLE = "idle"
    PANNING = "panning"
    PINCHING = "pinching"


class PinchDetector:
    """Reports the relative change of pointer spread between consecutive frames."""

    def __init__(self) -> None:
        self._previous_span: float | None = None

    @staticmethod
    def span(pointers: tuple[Pointer, ...]) -> float:
        focus_x = sum(p.x for p in pointers) / len(pointers)
        focus_y = sum(p.y for p in pointers) / len(pointers)
        mean_distance = sum(math.hypot(p.x - focus_x, p.y - focus_y) for p in pointers) / len(pointers)
        return mean_distance * 2

    def reset(self) -> None:
        self._previous_span = None

    def update(self, event: PointerEvent) -> float | None:
        """Return the scale factor since the last frame, or None while a baseline is set up."""
        span = self.span(event.pointers)
        previous = self._previous_span
        self._previous_span = span
        # Only MOVE frames report a factor; other actions set the baseline.
        if event.action is not PointerAction.MOVE or not previous or not span:
            return None
        return span / previous


class GestureInterpreter:
    """
    Turns pointer events into pan and zoom calls.

    One pointer drags the chart horizontally; two or more pinch-zoom it.
    Mostly-horizontal movement claims the gesture from the scroll parent.
    """

    def __init__(self, controller: TransformController, scroll_parent: ScrollParent | None = None) -> None:
        self.controller = controller
        self.scroll_parent = scroll_parent
        self.state = GestureState.IDLE
        self.pinch = PinchDetector()
        self._last_x = 0.0
        self._last_y = 0.0
        self._pointer_id: int | None = None

    def handle(self, event: PointerEvent) -> bool:
        """Process one event; returns False when the gesture is left to ancestors."""
        if not event.pointers:
            return False

        primary = event.primary
        if abs(primary.x - self._last_x) > abs(primary.y - self._last_y) and self.scroll_parent is not None:
            self.scroll_parent.request_disallow_intercept(True)

        if event.action in (PointerAction.UP, PointerAction.CANCEL):
            self._to_idle()
            return False

        if event.pointer_count > 1:
            return self._handle_pinch(event)
        return self._handle_drag(event)

    def _handle_pinch(self, event: PointerEvent) -> bool:
        if self.state is not GestureState.PINCHING:
            self.state = GestureState.PINCHING
            self.pinch.reset()
        factor = self.pinch.update(event)
        if factor is not None:
            self.controller.zoom(factor)
        return True

    def _handle_drag(self, event: PointerEvent) -> bool:
        pointer = event.primary
        if event.action is PointerAction.DOWN or self.state is not GestureState.PANNING:
            # Fresh press, or the last finger left over from a pinch: re-anchor only.
            self.state = GestureState.PANNING
            self.pinch.reset()
            self._anchor(pointer)
            return True

        if event.action is not PointerAction.MOVE:
            return False

        if self.controller.content_width <= self.controller.layout.viewport.width:
            return False

        if pointer.id == self._pointer_id:
            self.controller.pan(pointer.x - self._last_x)
        self._anchor(pointer)
        return True

    def _anchor(self, pointer: Pointer) -> None:
        self._last_x = pointer.x
        self._last_y = pointer.y
        self._pointer_id = pointer.id

    def _to_idle(self) -> None:
        self.state = GestureState.IDLE
        self.pinch.reset()
        self._pointer_id = None
