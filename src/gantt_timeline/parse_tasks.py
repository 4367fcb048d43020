from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, fields, replace
from typing import Any

import yaml

from .style import ChartStyle
from .task_models import Task


class TaskValidationError(Exception):
    """Raised when a task or style file does not match the expected structure."""


@dataclass(frozen=True)
class ChartInput:
    """Tasks and optional style overrides read from one YAML file."""

    tasks: list[Task]
    style: ChartStyle


@dataclass(frozen=True)
class _Path:
    """Helper to produce readable YAML path strings like tasks[0].start."""

    parts: tuple[str, ...] = ()

    def child(self, segment: str) -> "_Path":
        return _Path(self.parts + (segment,))

    def __str__(self) -> str:  # pragma: no cover - trivial
        return ".".join(self.parts) if self.parts else "root"


_STYLE_FIELDS = {f.name: f for f in fields(ChartStyle)}
_COLOR_FIELDS = {name for name, f in _STYLE_FIELDS.items() if f.type in ("str", str) and name != "font_family"}


def load_chart_input(path: str) -> ChartInput:
    """Load tasks (and an optional `style` mapping) from a YAML file."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return _parse_chart_input(raw, _Path())


def load_style(path: str, base: ChartStyle | None = None) -> ChartStyle:
    """Load a standalone style file; fields not given keep the values of `base`."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return _parse_style(raw or {}, _Path(), base or ChartStyle())


def _parse_chart_input(data: Any, path: _Path) -> ChartInput:
    if not isinstance(data, dict):
        raise TaskValidationError(f"{path}: expected mapping at top level")
    _assert_allowed_keys(data, {"tasks", "style"}, path)

    tasks_raw = data.get("tasks")
    if tasks_raw is None:
        raise TaskValidationError(f"{path}: missing required field 'tasks'")
    if not isinstance(tasks_raw, list):
        raise TaskValidationError(f"{path.child('tasks')}: expected list")

    tasks = [_parse_task(task_raw, path.child(f"tasks[{idx}]")) for idx, task_raw in enumerate(tasks_raw)]

    style = ChartStyle()
    if data.get("style") is not None:
        style = _parse_style(data["style"], path.child("style"), style)

    return ChartInput(tasks=tasks, style=style)


def _parse_task(data: Any, path: _Path) -> Task:
    if not isinstance(data, dict):
        raise TaskValidationError(f"{path}: expected mapping for task")

    _assert_allowed_keys(data, {"name", "start", "end"}, path)
    name = _require_str(data, "name", path)
    start = _parse_date(_require_value(data, "start", path), path.child("start"))
    end = _parse_date(_require_value(data, "end", path), path.child("end"))
    if start > end:
        raise TaskValidationError(f"{path}: end {end} precedes start {start}")
    return Task(name=name, date_start=start, date_end=end)


def _parse_style(data: Any, path: _Path, base: ChartStyle) -> ChartStyle:
    if not isinstance(data, dict):
        raise TaskValidationError(f"{path}: expected mapping for style")
    _assert_allowed_keys(data, set(_STYLE_FIELDS), path)

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        key_path = path.child(key)
        if key == "row_colors":
            if not isinstance(value, list) or not value or not all(isinstance(c, str) for c in value):
                raise TaskValidationError(f"{key_path}: expected non-empty list of colour strings")
            overrides[key] = tuple(value)
        elif key == "font_family" or key in _COLOR_FIELDS:
            if not isinstance(value, str) or not value.strip():
                raise TaskValidationError(f"{key_path}: expected non-empty string")
            overrides[key] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                raise TaskValidationError(f"{key_path}: expected non-negative number")
            overrides[key] = float(value)

    style = replace(base, **overrides)
    if style.max_scale < 1.0:
        raise TaskValidationError(f"{path.child('max_scale')}: expected a value of at least 1.0")
    return style


def _assert_allowed_keys(data: dict[str, Any], allowed: set[str], path: _Path) -> None:
    extras = sorted(set(data.keys()) - allowed)
    if extras:
        raise TaskValidationError(f"{path}: unexpected fields {extras}")


def _require_str(data: dict[str, Any], key: str, path: _Path) -> str:
    value = _require_value(data, key, path)
    if not isinstance(value, str) or not value.strip():
        raise TaskValidationError(f"{path.child(key)}: expected non-empty string")
    return value


def _require_value(data: dict[str, Any], key: str, path: _Path) -> Any:
    if key not in data:
        raise TaskValidationError(f"{path}: missing required field '{key}'")
    return data[key]


def _parse_date(value: Any, path: _Path) -> _dt.date:
    # YAML turns unquoted 2024-01-01 into a date already.
    if isinstance(value, _dt.datetime):
        return value.date()
    if isinstance(value, _dt.date):
        return value
    if not isinstance(value, str):
        raise TaskValidationError(f"{path}: expected YYYY-MM-DD date")
    try:
        return _dt.date.fromisoformat(value)
    except ValueError as exc:
        raise TaskValidationError(f"{path}: expected YYYY-MM-DD date") from exc
