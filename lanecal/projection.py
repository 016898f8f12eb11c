# lanecal/projection.py
from __future__ import annotations

import datetime as dt
from typing import List, Optional, Sequence

from .levels import LevelMap, assign_levels, is_task_on_day, task_span
from .model import DayWithTasks, Task, TaskWithMetadata
from .util.dates import DateLike, start_of_day


def tasks_for_day(
    tasks: Sequence[Task],
    day: DateLike,
    level_map: Optional[LevelMap] = None,
) -> List[TaskWithMetadata]:
    """Tasks active on `day` with their start/end/continue flags, in input order.

    Tasks missing from `level_map` default to level 0.
    """
    d = start_of_day(day)
    next_day = d + dt.timedelta(days=1)
    levels = level_map or {}

    out: List[TaskWithMetadata] = []
    for task in tasks:
        if not is_task_on_day(task, d):
            continue
        start, end = task_span(task)
        is_end = d == end
        out.append(
            TaskWithMetadata(
                task=task,
                day=d,
                is_start=d == start,
                is_end=is_end,
                is_continue=(not is_end) and next_day <= end,
                level=int(levels.get(task.id, 0)),
            )
        )
    return out


def project_days(
    days: Sequence[DateLike],
    tasks: Sequence[Task],
    level_map: LevelMap,
) -> List[DayWithTasks]:
    """Per-day view of `tasks`, each day's list ascending by level."""
    out: List[DayWithTasks] = []
    for day in days:
        day_tasks = tasks_for_day(tasks, day, level_map)
        day_tasks.sort(key=lambda t: t.level)
        out.append(DayWithTasks(day=start_of_day(day), tasks=tuple(day_tasks)))
    return out


def days_with_tasks(days: Sequence[DateLike], tasks: Sequence[Task]) -> List[DayWithTasks]:
    """Assign levels for this set of days and project them in one go."""
    return project_days(days, tasks, assign_levels(days, tasks))


__all__ = ["tasks_for_day", "project_days", "days_with_tasks"]
