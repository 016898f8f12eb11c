# lanecal/model.py
from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .util.dates import days_between

TODO = "To Do"
IN_PROGRESS = "In Progress"
REVIEW = "Review"
COMPLETED = "Completed"

CATEGORIES: Tuple[str, ...] = (TODO, IN_PROGRESS, REVIEW, COMPLETED)

_CATEGORY_KEY_RE = re.compile(r"[\s_\-]+")
_CATEGORY_BY_KEY: Dict[str, str] = {_CATEGORY_KEY_RE.sub("", c).lower(): c for c in CATEGORIES}


def normalize_category(value: object) -> Optional[str]:
    """Map "ToDo", "in_progress", "To Do", ... onto the stored literal.

    Returns None for anything that is not one of the four categories.
    """
    if not isinstance(value, str):
        return None
    return _CATEGORY_BY_KEY.get(_CATEGORY_KEY_RE.sub("", value).lower())


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    category: str
    start_date: dt.date
    end_date: dt.date

    @property
    def duration_days(self) -> int:
        """Whole days from start to end; time-of-day is ignored."""
        return days_between(self.start_date, self.end_date)

    @property
    def is_multi_day(self) -> bool:
        return self.duration_days != 0


@dataclass(frozen=True)
class TaskWithMetadata:
    """A task as seen from one day cell."""

    task: Task
    day: dt.date
    is_start: bool
    is_end: bool
    is_continue: bool
    level: int

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def name(self) -> str:
        return self.task.name

    @property
    def category(self) -> str:
        return self.task.category


@dataclass(frozen=True)
class DayWithTasks:
    day: dt.date
    tasks: Tuple[TaskWithMetadata, ...]

    @property
    def max_level(self) -> int:
        return max((t.level for t in self.tasks), default=-1)

    def rows(self) -> Iterator[Optional[TaskWithMetadata]]:
        """One slot per level 0..max_level; None marks an empty placeholder row."""
        by_level: Dict[int, TaskWithMetadata] = {}
        for t in self.tasks:
            by_level.setdefault(t.level, t)
        for level in range(self.max_level + 1):
            yield by_level.get(level)


__all__ = [
    "TODO",
    "IN_PROGRESS",
    "REVIEW",
    "COMPLETED",
    "CATEGORIES",
    "normalize_category",
    "Task",
    "TaskWithMetadata",
    "DayWithTasks",
]
