# lanecal/planner.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from .filters import TaskFilter
from .levels import LevelMap, assign_levels, max_level
from .model import DayWithTasks, Task, normalize_category
from .projection import project_days
from .util.dates import DateLike, SUNDAY, add_days, month_grid_days, month_start, start_of_day
from .validate import assert_valid_task_fields


def find_task(tasks: Iterable[Task], task_id: str) -> Optional[Task]:
    for t in tasks:
        if t.id == task_id:
            return t
    return None


def ordered_span(start: DateLike, end: DateLike) -> Tuple[dt.date, dt.date]:
    """(start, end) as days, swapped when given in reverse."""
    s, e = start_of_day(start), start_of_day(end)
    if e < s:
        s, e = e, s
    return s, e


def new_task_id(existing_ids: Iterable[str], now: Optional[dt.datetime] = None) -> str:
    """Creation timestamp id, e.g. 2026-10-19T08:15:02.123Z; suffixed -2, -3... if taken."""
    now = now or dt.datetime.now(dt.timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(dt.timezone.utc)
    base = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    taken = set(existing_ids)
    candidate = base
    n = 1
    while candidate in taken:
        n += 1
        candidate = f"{base}-{n}"
    return candidate


def create_task(
    tasks: Sequence[Task],
    *,
    name: str,
    category: str,
    start: Optional[DateLike],
    end: Optional[DateLike],
    now: Optional[dt.datetime] = None,
) -> Tuple[Tuple[Task, ...], Task]:
    """Append a new task. Returns (new task tuple, created task)."""
    category = normalize_category(category) or category
    assert_valid_task_fields(name, category, start, end)
    s, e = ordered_span(start, end)  # type: ignore[arg-type]
    task = Task(
        id=new_task_id((t.id for t in tasks), now=now),
        name=name.strip(),
        category=category,
        start_date=s,
        end_date=e,
    )
    return tuple(tasks) + (task,), task


def update_task(
    tasks: Sequence[Task],
    task_id: str,
    *,
    name: Optional[str] = None,
    category: Optional[str] = None,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> Tuple[Task, ...]:
    """Edit a task in place of the old one; identity is kept. Unknown id is a no-op."""
    cur = find_task(tasks, task_id)
    if cur is None:
        return tuple(tasks)

    new_name = cur.name if name is None else name
    new_category = cur.category if category is None else (normalize_category(category) or category)
    new_start = cur.start_date if start is None else start
    new_end = cur.end_date if end is None else end
    assert_valid_task_fields(new_name, new_category, new_start, new_end)

    s, e = ordered_span(new_start, new_end)
    updated = replace(cur, name=new_name.strip(), category=new_category, start_date=s, end_date=e)
    return tuple(updated if t.id == task_id else t for t in tasks)


def delete_task(tasks: Sequence[Task], task_id: str) -> Tuple[Task, ...]:
    return tuple(t for t in tasks if t.id != task_id)


def relocate(tasks: Sequence[Task], task_id: str, target_day: DateLike) -> Tuple[Task, ...]:
    """Move a task so it starts on `target_day`, keeping its length in days.

    Unknown id is a no-op. Levels are not touched here; the next view build
    re-derives them.
    """
    cur = find_task(tasks, task_id)
    if cur is None:
        return tuple(tasks)

    new_start = start_of_day(target_day)
    moved = replace(cur, start_date=new_start, end_date=add_days(new_start, cur.duration_days))
    return tuple(moved if t.id == task_id else t for t in tasks)


@dataclass(frozen=True)
class DaySelection:
    """Two-click day range picked on the grid."""

    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @property
    def complete(self) -> bool:
        return self.start is not None and self.end is not None

    def span(self) -> Optional[Tuple[dt.date, dt.date]]:
        if not self.complete:
            return None
        return ordered_span(self.start, self.end)  # type: ignore[arg-type]


def click_day(selection: DaySelection, day: DateLike) -> DaySelection:
    d = start_of_day(day)
    if selection.start is None:
        return DaySelection(start=d)
    if selection.end is None:
        return DaySelection(start=selection.start, end=d)
    return DaySelection(start=d)


@dataclass(frozen=True)
class MonthView:
    month: dt.date
    days: Tuple[dt.date, ...]
    tasks: Tuple[Task, ...]
    levels: LevelMap
    cells: Tuple[DayWithTasks, ...]

    @property
    def max_level(self) -> int:
        return max_level(self.levels)


def build_month_view(
    tasks: Sequence[Task],
    month: DateLike,
    *,
    task_filter: Optional[TaskFilter] = None,
    week_start: int = SUNDAY,
    today: Optional[dt.date] = None,
) -> MonthView:
    """Filter, assign levels and project one month grid. Pure; re-run on any change."""
    first = month_start(month)
    days: List[dt.date] = month_grid_days(first, week_start)
    flt = task_filter or TaskFilter.all()
    visible = flt.apply(tasks, today=today)
    levels = assign_levels(days, visible)
    cells = project_days(days, visible, levels)
    return MonthView(
        month=first,
        days=tuple(days),
        tasks=tuple(visible),
        levels=levels,
        cells=tuple(cells),
    )


__all__ = [
    "find_task",
    "ordered_span",
    "new_task_id",
    "create_task",
    "update_task",
    "delete_task",
    "relocate",
    "DaySelection",
    "click_day",
    "MonthView",
    "build_month_view",
]
