from __future__ import annotations

import logging
import math
from functools import lru_cache, partial
from pathlib import Path
from typing import Callable

import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.font_manager import FontProperties
from matplotlib.patches import PathPatch, Rectangle
from matplotlib.textpath import TextPath

from .geometry import TaskGeometry
from .style import FONT_FAMILY, ChartStyle
from .view import GanttView

logger = logging.getLogger(__name__)

DEFAULT_DPI = 100
POINTS_PER_INCH = 72.0

# Draw order inside the axes.
ROW_ZORDER = 0
SEPARATOR_ZORDER = 1
PERIOD_NAME_ZORDER = 2
TASK_ZORDER = 3
TASK_NAME_ZORDER = 4

TextMeasure = Callable[[str], float]


@lru_cache(maxsize=4096)
def measure_text_width(text: str, size: float, family: str = FONT_FAMILY) -> float:
    """Rendered width of `text` in pixels for a font `size` pixels tall."""
    if not text:
        return 0.0
    # Names are plain text, never mathtext.
    literal = text.replace("$", r"\$")
    extents = TextPath((0, 0), literal, size=size, prop=FontProperties(family=family)).get_extents()
    if not math.isfinite(extents.x1):
        return 0.0
    return max(extents.x1, 0.0)


def fit_prefix(text: str, max_width: float, measure: TextMeasure) -> str:
    """Longest prefix of `text` whose width fits in `max_width`; no ellipsis."""
    count = 0
    for end in range(1, len(text) + 1):
        if measure(text[:end]) > max_width:
            break
        count = end
    return text[:count]


def task_label_layout(
    geometry: TaskGeometry, style: ChartStyle, measure: TextMeasure | None = None
) -> tuple[float, str] | None:
    """
    Left edge and visible text of a task name, or None when the bar leaves no room.

    Text starts just past the notch but never left of the view edge margin.
    """

    if measure is None:
        measure = partial(measure_text_width, size=style.task_name_text_size, family=style.font_family)
    margin = style.task_text_horizontal_margin
    rect = geometry.rect
    text_left = max(rect.x0 + style.cut_out_radius + margin, margin)
    text_width = rect.x1 - margin - text_left
    if text_width <= 0:
        return None
    return text_left, fit_prefix(geometry.task.name, text_width, measure)


class ChartRenderer:
    """Draws one frame of a GanttView into axes whose data units are view pixels."""

    def __init__(self, view: GanttView, measure: TextMeasure | None = None) -> None:
        self.view = view
        self.style = view.style
        self.measure = measure
        self._gradient = LinearSegmentedColormap.from_list(
            "task_gradient", [self.style.gradient_start_color, self.style.gradient_end_color]
        )

    def draw(self, ax: plt.Axes) -> None:
        ax.clear()
        ax.set_axis_off()
        points_per_pixel = POINTS_PER_INCH / ax.figure.dpi

        self._draw_rows(ax, points_per_pixel)
        self._draw_periods(ax, points_per_pixel)
        self._draw_tasks(ax, points_per_pixel)

        ax.set_xlim(0, self.view.width)
        ax.set_ylim(self.view.height, 0)

    def _draw_rows(self, ax: plt.Axes, points_per_pixel: float) -> None:
        width, height = self.view.width, self.view.height
        row_height = self.style.row_height
        colors = self.style.row_colors
        for index in range(len(self.view.tasks) + 1):
            top = row_height * index
            if top >= height or top + row_height <= 0:
                continue
            ax.add_patch(
                Rectangle(
                    (0, top),
                    width,
                    row_height,
                    facecolor=colors[index % len(colors)],
                    edgecolor="none",
                    zorder=ROW_ZORDER,
                )
            )

        ax.plot(
            [0, width],
            [row_height, row_height],
            color=self.style.separator_color,
            linewidth=self.style.separator_width * points_per_pixel,
            zorder=SEPARATOR_ZORDER,
        )

    def _draw_periods(self, ax: plt.Axes, points_per_pixel: float) -> None:
        transformer = self.view.transformer
        period_width = self.style.period_width * transformer.scale_x
        pan = transformer.pan_offset_x
        height = self.view.height
        name_y = self.style.row_height / 2

        for index, name in enumerate(self.view.period_index):
            left = period_width * index + pan
            right = period_width * (index + 1) + pan
            if right < 0 or left > self.view.width:
                continue
            ax.text(
                (left + right) / 2,
                name_y,
                name,
                ha="center",
                va="center",
                fontsize=self.style.period_name_text_size * points_per_pixel,
                family=self.style.font_family,
                color=self.style.period_name_color,
                zorder=PERIOD_NAME_ZORDER,
                parse_math=False,
            )
            ax.plot(
                [right, right],
                [0, height],
                color=self.style.separator_color,
                linewidth=self.style.separator_width * points_per_pixel,
                zorder=SEPARATOR_ZORDER,
            )

    def _draw_tasks(self, ax: plt.Axes, points_per_pixel: float) -> None:
        width, height = self.view.width, self.view.height
        for geometry in self.view.layout.visible_geometries():
            patch = PathPatch(geometry.outline, facecolor="none", edgecolor="none", zorder=TASK_ZORDER)
            ax.add_patch(patch)
            # Gradient spans the full view width.
            fill = ax.imshow(
                [[0.0, 1.0]],
                cmap=self._gradient,
                extent=(0, width, height, 0),
                aspect="auto",
                interpolation="bilinear",
                zorder=TASK_ZORDER,
            )
            fill.set_clip_path(patch)

            label = task_label_layout(geometry, self.style, self.measure)
            if label is None:
                continue
            text_left, text = label
            if not text:
                continue
            ax.text(
                text_left,
                (geometry.rect.y0 + geometry.rect.y1) / 2,
                text,
                ha="left",
                va="center",
                fontsize=self.style.task_name_text_size * points_per_pixel,
                family=self.style.font_family,
                color=self.style.task_name_color,
                zorder=TASK_NAME_ZORDER,
                parse_math=False,
            )


def new_chart_figure(view: GanttView, dpi: int = DEFAULT_DPI) -> tuple[plt.Figure, plt.Axes]:
    """Figure sized to the view with a single borderless axes."""
    if view.width <= 0 or view.height <= 0:
        raise ValueError("view has no size; measure it before drawing")
    fig = plt.figure(figsize=(view.width / dpi, view.height / dpi), dpi=dpi)
    ax = fig.add_axes((0, 0, 1, 1))
    return fig, ax


def render_chart(view: GanttView, out_path: str, dpi: int = DEFAULT_DPI) -> None:
    """
    Render the current frame of `view` to `out_path`.

    The file format follows the suffix (svg, png, pdf...). Parent directories
    are created as needed.
    """

    fig, ax = new_chart_figure(view, dpi)
    try:
        ChartRenderer(view).draw(ax)
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=dpi)
    finally:
        plt.close(fig)
    logger.info("Rendered %d tasks to %s", len(view.tasks), out_path)
