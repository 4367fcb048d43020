from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

import matplotlib.path as mpath
from matplotlib.transforms import Affine2D, Bbox

from .periods import PeriodIndex, PeriodType, build_period_indexes
from .style import ChartStyle
from .task_models import Task

ARC_SEGMENTS = 8  # line segments per quarter circle


@dataclass
class Viewport:
    """Measured size of the drawing surface in pixels."""

    width: float = 0.0
    height: float = 0.0


@dataclass
class TaskGeometry:
    """
    Screen-space state for one task row.

    `untransformed_rect` is derived from dates and the active period index;
    `rect` and `outline` follow the current zoom/pan transform.
    """

    task: Task
    row: int
    untransformed_rect: Bbox = field(default_factory=Bbox.null)
    rect: Bbox = field(default_factory=Bbox.null)
    outline: mpath.Path | None = None


def _arc(cx: float, cy: float, radius: float, start_deg: float, end_deg: float) -> list[tuple[float, float]]:
    """Points along an arc; angles are measured in view space where y grows downwards."""
    steps = max(1, int(math.ceil(abs(end_deg - start_deg) / 90.0 * ARC_SEGMENTS)))
    points = []
    for i in range(steps + 1):
        theta = math.radians(start_deg + (end_deg - start_deg) * i / steps)
        points.append((cx + radius * math.cos(theta), cy + radius * math.sin(theta)))
    return points


def task_outline(rect: Bbox, corner_radius: float, notch_radius: float) -> mpath.Path:
    """
    Rounded rectangle with a circular notch centred on its left-middle point.

    The outline is traced clockwise on screen and closed; the notch is the part
    of the circle that lies inside the rectangle.
    """

    left, right = sorted((rect.x0, rect.x1))
    top, bottom = sorted((rect.y0, rect.y1))
    width = right - left
    height = bottom - top
    cy = (top + bottom) / 2

    corner = max(0.0, min(corner_radius, width / 2, height / 2))
    notch = max(0.0, min(notch_radius, width, height / 2 - corner))

    points: list[tuple[float, float]] = [(left, cy - notch)]
    points += _arc(left + corner, top + corner, corner, 180, 270)
    points += _arc(right - corner, top + corner, corner, 270, 360)
    points += _arc(right - corner, bottom - corner, corner, 0, 90)
    points += _arc(left + corner, bottom - corner, corner, 90, 180)
    if notch > 0:
        points += _arc(left, cy, notch, 90, -90)
    else:
        points.append((left, cy))
    return _polygon_path(points)


def _polygon_path(points: list[tuple[float, float]]) -> mpath.Path:
    deduped = [points[0]]
    for pt in points[1:]:
        if pt != deduped[-1]:
            deduped.append(pt)
    deduped.append(deduped[0])
    codes = [mpath.Path.MOVETO] + [mpath.Path.LINETO] * (len(deduped) - 2) + [mpath.Path.CLOSEPOLY]
    return mpath.Path(deduped, codes)


class ChartLayout:
    """Task list, period indexes and per-task geometry, kept parallel by row."""

    def __init__(self, style: ChartStyle) -> None:
        self.style = style
        self.viewport = Viewport()
        self.tasks: list[Task] = []
        self.period_indexes: dict[PeriodType, PeriodIndex] = build_period_indexes([])
        self.geometries: list[TaskGeometry] = []
        self.period_type = PeriodType.MONTH

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        self.tasks = list(tasks)
        self.period_indexes = build_period_indexes(self.tasks)
        self.geometries = [TaskGeometry(task=task, row=row) for row, task in enumerate(self.tasks)]

    def content_width(self, period_type: PeriodType) -> float:
        """Width of all period columns at scale 1."""
        return self.style.period_width * len(self.period_indexes[period_type])

    @property
    def content_height(self) -> float:
        return self.style.row_height * (len(self.tasks) + 1)

    def position_for_date(self, value: date, period_type: PeriodType) -> float:
        index = self.period_indexes[period_type]
        return self.style.period_width * (index.position(value) + period_type.fraction_within_period(value))

    def rebuild(self, period_type: PeriodType) -> None:
        """Recompute every untransformed rect for `period_type`."""
        self.period_type = period_type
        row_height = self.style.row_height
        margin = self.style.task_vertical_margin
        for geometry in self.geometries:
            geometry.untransformed_rect = Bbox.from_extents(
                self.position_for_date(geometry.task.date_start, period_type),
                row_height * (geometry.row + 1) + margin,
                self.position_for_date(geometry.task.date_end, period_type),
                row_height * (geometry.row + 2) - margin,
            )
            geometry.rect = geometry.untransformed_rect.frozen()

    def is_on_screen(self, rect: Bbox) -> bool:
        return rect.y0 < self.viewport.height and (rect.x1 > 0 or rect.x0 < self.viewport.width)

    def apply_transform(self, transform: Affine2D) -> None:
        """Map every rect through `transform`; outlines are rebuilt for on-screen rects only."""
        for geometry in self.geometries:
            geometry.rect = geometry.untransformed_rect.transformed(transform)
            if self.is_on_screen(geometry.rect):
                geometry.outline = task_outline(
                    geometry.rect, self.style.task_corner_radius, self.style.cut_out_radius
                )

    def visible_geometries(self) -> list[TaskGeometry]:
        return [g for g in self.geometries if g.outline is not None and self.is_on_screen(g.rect)]
