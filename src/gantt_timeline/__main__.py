from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
import webbrowser
from pathlib import Path

import yaml

from .measure import LayoutConfigurationError, MeasureSpec
from .parse_tasks import TaskValidationError, load_chart_input, load_style
from .style import ChartStyle
from .task_models import Task, sample_tasks
from .view import GanttView

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 400


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gantt-timeline",
        description="Zoomable Gantt timeline",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("tasks", nargs="?", help="Path to tasks YAML")
    parser.add_argument("--demo", action="store_true", help="Use built-in sample tasks around today")
    parser.add_argument("--out", default="output/gantt_timeline.svg", help="Output image path (format from suffix)")
    parser.add_argument("--width", type=float, default=DEFAULT_WIDTH, help="View width in pixels")
    parser.add_argument("--height", type=float, default=DEFAULT_HEIGHT, help="Maximum view height in pixels")
    parser.add_argument("--scale", type=float, default=1.0, help="Initial horizontal zoom")
    parser.add_argument("--pan", type=float, default=0.0, help="Initial horizontal pan offset in pixels")
    parser.add_argument("--style", help="Path to a style YAML overriding chart dimensions and colours")
    parser.add_argument("--state", help="View state file restored on start and written on exit")
    parser.add_argument("--interactive", action="store_true", help="Open a window with drag/scroll navigation")
    parser.add_argument(
        "--view",
        dest="view",
        action="store_true",
        default=True,
        help="Best-effort open the output file after rendering",
    )
    parser.add_argument(
        "--no-view",
        dest="view",
        action="store_false",
        help="Do not open the output file after rendering",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    return parser


def _load_inputs(args: argparse.Namespace) -> tuple[list[Task], ChartStyle]:
    if args.tasks:
        chart_input = load_chart_input(args.tasks)
        tasks, style = chart_input.tasks, chart_input.style
    else:
        tasks, style = sample_tasks(dt.date.today()), ChartStyle()
    if args.style:
        style = load_style(args.style, base=style)
    return tasks, style


def _build_view(tasks: list[Task], style: ChartStyle, args: argparse.Namespace) -> GanttView:
    view = GanttView(style)
    view.tasks = tasks
    width, height = view.measure(MeasureSpec.exact(args.width), MeasureSpec.at_most(args.height))
    view.on_size_changed(width, height)

    state_path = Path(args.state) if args.state else None
    if state_path is not None and state_path.exists():
        view.restore_state(state_path.read_bytes())
    else:
        view.transformer.restore(args.pan, args.scale)
    return view


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.tasks and not args.demo:
        parser.error("either a tasks file or --demo is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        tasks, style = _load_inputs(args)
    except (yaml.YAMLError, TaskValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError as exc:
        print(f"Error: file not found: {exc.filename}", file=sys.stderr)
        return 1
    except Exception as exc:  # Unexpected
        print(f"Unexpected error while loading tasks: {exc}", file=sys.stderr)
        return 1

    try:
        view = _build_view(tasks, style, args)
    except (LayoutConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.interactive:
        from .interactive import InteractiveChart

        def save_state(state: bytes) -> None:
            if args.state:
                Path(args.state).write_bytes(state)

        InteractiveChart(view, on_close=save_state).show()
        return 0

    import matplotlib

    matplotlib.use("Agg")  # headless, deterministic output
    from .render_chart import render_chart

    try:
        render_chart(view, out_path=args.out)
    except Exception as exc:
        print(f"Unexpected error while rendering: {exc}", file=sys.stderr)
        return 1

    if args.state:
        Path(args.state).write_bytes(view.serialize_state())

    if args.view:
        try:
            webbrowser.open(Path(args.out).resolve().as_uri())
        except Exception:
            pass

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
