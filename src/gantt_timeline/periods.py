from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Callable, Hashable, Iterable, Iterator

if TYPE_CHECKING:
    from .task_models import Task


def add_months(value: date, months: int) -> date:
    """Shift by whole calendar months, clamping the day to the target month length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


@dataclass(frozen=True)
class PeriodBehavior:
    """Pure date functions describing one time unit of the axis."""

    increment: Callable[[date], date]
    label: Callable[[date], str]
    fraction_within_period: Callable[[date], float]
    key: Callable[[date], Hashable]


class PeriodType(Enum):
    """Time unit of the horizontal axis, ordered from coarsest to finest."""

    MONTH = "month"
    WEEK = "week"

    @property
    def behavior(self) -> PeriodBehavior:
        return _BEHAVIORS[self]

    def increment(self, value: date) -> date:
        return self.behavior.increment(value)

    def label(self, value: date) -> str:
        return self.behavior.label(value)

    def fraction_within_period(self, value: date) -> float:
        return self.behavior.fraction_within_period(value)

    def key(self, value: date) -> Hashable:
        return self.behavior.key(value)


_BEHAVIORS: dict[PeriodType, PeriodBehavior] = {
    PeriodType.MONTH: PeriodBehavior(
        increment=lambda d: add_months(d, 1),
        label=lambda d: calendar.month_name[d.month],
        fraction_within_period=lambda d: (d.day - 1) / calendar.monthrange(d.year, d.month)[1],
        key=lambda d: (d.year, d.month),
    ),
    PeriodType.WEEK: PeriodBehavior(
        increment=lambda d: d + timedelta(weeks=1),
        label=lambda d: str(d.isocalendar()[1]),
        fraction_within_period=lambda d: (d.isoweekday() - 1) / 7,
        key=lambda d: tuple(d.isocalendar()[:2]),
    ),
}


@dataclass(frozen=True)
class PeriodIndex:
    """
    Ordered period columns of the axis for one unit.

    Labels repeat across years (two Januaries, two week 1s), so positions are
    looked up by the unambiguous period key rather than by label text.
    """

    period_type: PeriodType
    labels: tuple[str, ...] = ()
    keys: tuple[Hashable, ...] = ()

    def __len__(self) -> int:
        return len(self.labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __getitem__(self, index: int) -> str:
        return self.labels[index]

    def position(self, value: date) -> int:
        """Column of the period containing `value`."""
        key = self.period_type.key(value)
        try:
            return self.keys.index(key)
        except ValueError as exc:
            raise KeyError(f"{value} is outside the {self.period_type.value} index") from exc


def build_period_index(tasks: Iterable[Task], period_type: PeriodType) -> PeriodIndex:
    """
    Build the period columns spanning every task for `period_type`.

    Steps from the earliest start while the date is before the latest end plus
    one month, so at least one extra column trails the last task.
    """

    tasks = list(tasks)
    if not tasks:
        return PeriodIndex(period_type)

    start = min(task.date_start for task in tasks)
    limit = add_months(max(task.date_end for task in tasks), 1)

    labels: list[str] = []
    keys: list[Hashable] = []
    current = start
    while current < limit:
        labels.append(period_type.label(current))
        keys.append(period_type.key(current))
        current = period_type.increment(current)
    return PeriodIndex(period_type, tuple(labels), tuple(keys))


def build_period_indexes(tasks: Iterable[Task]) -> dict[PeriodType, PeriodIndex]:
    tasks = list(tasks)
    return {period_type: build_period_index(tasks, period_type) for period_type in PeriodType}
