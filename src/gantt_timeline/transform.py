from __future__ import annotations

import logging
from typing import Callable

from matplotlib.transforms import Affine2D

from .geometry import ChartLayout
from .periods import PeriodType
from .style import MAX_SCALE

logger = logging.getLogger(__name__)

MIN_SCALE = 1.0


def period_type_for_scale(scale: float, max_scale: float = MAX_SCALE) -> PeriodType:
    """
    Pick the axis unit for a zoom level.

    [1, max_scale] is split into one equal bucket per unit, coarsest first; the
    top edge belongs to the last bucket.
    """

    period_types = list(PeriodType)
    step = (max_scale - MIN_SCALE) / len(period_types)
    if step <= 0:
        return period_types[0]
    index = int((scale - MIN_SCALE) / step)
    return period_types[max(0, min(index, len(period_types) - 1))]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


class TransformController:
    """
    Horizontal zoom/pan state of the chart.

    Content is scaled about the origin by `scale_x`, then shifted by
    `pan_offset_x`. Pan is kept inside [min_pan, 0] so empty space beyond the
    content never comes into view.
    """

    def __init__(
        self,
        layout: ChartLayout,
        max_scale: float = MAX_SCALE,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.layout = layout
        self.max_scale = max_scale
        self.on_change = on_change
        self.pan_offset_x = 0.0
        self.scale_x = MIN_SCALE
        self.period_type = period_type_for_scale(self.scale_x, self.max_scale)

    @property
    def content_width(self) -> float:
        """Width of the content at the current scale."""
        return self.layout.content_width(self.period_type) * self.scale_x

    @property
    def min_pan(self) -> float:
        return min(self.layout.viewport.width - self.content_width, 0.0)

    def affine(self) -> Affine2D:
        return Affine2D().scale(self.scale_x, 1.0).translate(self.pan_offset_x, 0.0)

    def pan(self, dx: float) -> None:
        self.pan_offset_x = _clamp(self.pan_offset_x + dx, self.min_pan, 0.0)
        self._transform_tasks()

    def zoom(self, factor: float) -> None:
        self.scale_x = _clamp(self.scale_x * factor, MIN_SCALE, self.max_scale)
        self._clamp_pan()
        self._update_period_type()
        self._transform_tasks()

    def recalculate(self) -> None:
        """Re-apply the bounds and re-derive geometry, e.g. after a resize."""
        self.scale_x = _clamp(self.scale_x, MIN_SCALE, self.max_scale)
        self._clamp_pan()
        self._update_period_type()
        self._transform_tasks()

    def reset(self) -> None:
        self.pan_offset_x = 0.0
        self.scale_x = MIN_SCALE
        self.recalculate()

    def restore(self, pan_offset_x: float, scale_x: float) -> None:
        self.pan_offset_x = pan_offset_x
        self.scale_x = scale_x
        self.recalculate()

    def rebuild_tasks(self) -> None:
        """Recompute untransformed rects for the active unit and re-apply the transform."""
        self.layout.rebuild(self.period_type)
        self.recalculate()

    def _clamp_pan(self) -> None:
        self.pan_offset_x = _clamp(self.pan_offset_x, self.min_pan, 0.0)

    def _update_period_type(self) -> None:
        period_type = period_type_for_scale(self.scale_x, self.max_scale)
        if period_type is not self.period_type or self.layout.period_type is not period_type:
            logger.debug("Switching period type %s -> %s at scale %.3f", self.period_type.name, period_type.name, self.scale_x)
            self.period_type = period_type
            self.layout.rebuild(period_type)
            # Content width depends on the unit's column count.
            self._clamp_pan()

    def _transform_tasks(self) -> None:
        self.layout.apply_transform(self.affine())
        if self.on_change is not None:
            self.on_change()
