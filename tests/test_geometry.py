import datetime as dt

import pytest
from matplotlib.path import Path
from matplotlib.transforms import Affine2D, Bbox

from gantt_timeline.geometry import ChartLayout, task_outline
from gantt_timeline.periods import PeriodType
from gantt_timeline.style import ChartStyle
from gantt_timeline.task_models import Task


def _layout(width=200.0, height=200.0):
    layout = ChartLayout(ChartStyle(period_width=100, row_height=48, task_vertical_margin=8))
    layout.set_tasks(
        [
            Task("Task1", dt.date(2024, 1, 1), dt.date(2024, 2, 1)),
            Task("Task2", dt.date(2024, 1, 15), dt.date(2024, 3, 1)),
        ]
    )
    layout.viewport.width = width
    layout.viewport.height = height
    layout.rebuild(PeriodType.MONTH)
    return layout


def test_task_rejects_inverted_range():
    with pytest.raises(ValueError):
        Task("Backwards", dt.date(2024, 2, 1), dt.date(2024, 1, 1))


def test_untransformed_rects_skip_axis_row():
    layout = _layout()
    first, second = layout.geometries

    assert (first.untransformed_rect.x0, first.untransformed_rect.x1) == (0, 100)
    assert (first.untransformed_rect.y0, first.untransformed_rect.y1) == (56, 88)
    assert second.untransformed_rect.x0 == pytest.approx(100 * 14 / 31)
    assert second.untransformed_rect.x1 == 200
    assert (second.untransformed_rect.y0, second.untransformed_rect.y1) == (104, 136)


def test_apply_transform_scales_then_translates_x_only():
    layout = _layout()

    layout.apply_transform(Affine2D().scale(1.5, 1.0).translate(-20, 0))

    rect = layout.geometries[0].rect
    assert rect.x0 == pytest.approx(-20)
    assert rect.x1 == pytest.approx(130)
    assert (rect.y0, rect.y1) == (56, 88)
    # Untransformed rect is kept for the next transform.
    assert layout.geometries[0].untransformed_rect.x1 == 100


def test_outlines_only_built_for_rows_on_screen():
    layout = _layout(height=100)

    layout.apply_transform(Affine2D())

    first, second = layout.geometries
    assert first.outline is not None
    assert second.outline is None
    assert layout.visible_geometries() == [first]


def test_bar_panned_fully_left_still_counts_as_on_screen():
    layout = _layout()

    layout.apply_transform(Affine2D().translate(-500, 0))

    first = layout.geometries[0]
    assert first.rect.x1 <= 0
    # right > 0 or left < view width: the left test alone keeps the bar.
    assert layout.is_on_screen(first.rect)
    assert first.outline is not None


def test_horizontal_visibility_follows_either_edge():
    layout = _layout(width=200, height=200)

    assert layout.is_on_screen(Bbox.from_extents(-300, 56, -100, 88))
    assert layout.is_on_screen(Bbox.from_extents(300, 56, 500, 88))
    assert layout.is_on_screen(Bbox.from_extents(50, 56, 150, 88))
    assert not layout.is_on_screen(Bbox.from_extents(50, 200, 150, 232))


def test_content_size_follows_index_and_rows():
    layout = _layout()

    assert layout.content_width(PeriodType.MONTH) == 300
    assert layout.content_width(PeriodType.WEEK) == 1300
    assert layout.content_height == 48 * 3


def test_outline_is_rounded_rect_with_left_notch():
    rect = Bbox.from_extents(0, 0, 100, 32)

    outline = task_outline(rect, corner_radius=8, notch_radius=5)

    assert outline.codes[0] == Path.MOVETO
    assert outline.codes[-1] == Path.CLOSEPOLY
    assert not outline.contains_point((2, 16))  # inside the notch
    assert outline.contains_point((8, 16))
    assert outline.contains_point((50, 16))
    assert outline.contains_point((98, 16))
    assert not outline.contains_point((0.5, 0.5))  # rounded corner
    assert outline.contains_point((50, 1))


def test_outline_radii_are_clamped_for_narrow_bars():
    rect = Bbox.from_extents(10, 0, 13, 32)

    outline = task_outline(rect, corner_radius=8, notch_radius=5)
    extents = outline.get_extents()

    assert extents.x0 >= 10 - 1e-9
    assert extents.x1 <= 13 + 1e-9
