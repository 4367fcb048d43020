from __future__ import annotations

from dataclasses import dataclass

# Dimensions are in view pixels.
PERIOD_WIDTH = 100.0
ROW_HEIGHT = 48.0
TASK_CORNER_RADIUS = 8.0
TASK_VERTICAL_MARGIN = 8.0
TASK_TEXT_HORIZONTAL_MARGIN = 8.0
PERIOD_NAME_TEXT_SIZE = 14.0
TASK_NAME_TEXT_SIZE = 14.0
SEPARATOR_WIDTH = 1.0
MAX_SCALE = 2.0

ROW_COLORS = ("#f5f5f5", "#ffffff")
SEPARATOR_COLOR = "#e0e0e0"
PERIOD_NAME_COLOR = "#9e9e9e"
TASK_NAME_COLOR = "#ffffff"
GRADIENT_START_COLOR = "#5c6bc0"
GRADIENT_END_COLOR = "#26c6da"
FONT_FAMILY = "DejaVu Sans"


@dataclass(frozen=True)
class ChartStyle:
    """Dimensions and colours shared by the geometry model and the renderer."""

    period_width: float = PERIOD_WIDTH
    row_height: float = ROW_HEIGHT
    task_corner_radius: float = TASK_CORNER_RADIUS
    task_vertical_margin: float = TASK_VERTICAL_MARGIN
    task_text_horizontal_margin: float = TASK_TEXT_HORIZONTAL_MARGIN
    period_name_text_size: float = PERIOD_NAME_TEXT_SIZE
    task_name_text_size: float = TASK_NAME_TEXT_SIZE
    separator_width: float = SEPARATOR_WIDTH
    max_scale: float = MAX_SCALE
    row_colors: tuple[str, ...] = ROW_COLORS
    separator_color: str = SEPARATOR_COLOR
    period_name_color: str = PERIOD_NAME_COLOR
    task_name_color: str = TASK_NAME_COLOR
    gradient_start_color: str = GRADIENT_START_COLOR
    gradient_end_color: str = GRADIENT_END_COLOR
    font_family: str = FONT_FAMILY

    @property
    def cut_out_radius(self) -> float:
        """Radius of the notch cut into the left edge of each task bar."""
        return (self.row_height - self.task_vertical_margin * 2) / 6
