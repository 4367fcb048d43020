from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .periods import add_months


@dataclass(frozen=True)
class Task:
    """Single bar on the timeline, spanning date_start to date_end."""

    name: str
    date_start: date
    date_end: date

    def __post_init__(self) -> None:
        if self.date_start > self.date_end:
            raise ValueError(f"Task '{self.name}' ends ({self.date_end}) before it starts ({self.date_start})")


def sample_tasks(today: date) -> list[Task]:
    """Demo task list placed around `today`, used when no input file is given."""

    week = timedelta(weeks=1)
    return [
        Task("Task 1", add_months(today, -1), today),
        Task("Task 2 long name", today - 2 * week, today + week),
        Task("Task 3", add_months(today, -2), add_months(today, 2)),
        Task("Some Task 4", today + 2 * week, add_months(today, 2) + week),
        Task("Task 5", add_months(today, -2) - week, today + week),
        Task("Task 6", add_months(today, -3), add_months(today, -2)),
        Task("Task 7", add_months(today, 3), add_months(today, 4)),
    ]
