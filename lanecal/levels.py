# lanecal/levels.py
"""Lane (level) assignment for month-grid task bars.

Every task gets a non-negative level: the row it occupies inside each day cell
it touches. Two tasks that share a visible day never share a level, and a
multi-day task keeps one level across its whole span so its bar renders as a
continuous strip.

Assignment runs in two phases over the visible days:

  1. Multi-day tasks, ordered by start day then longest first, take the lowest
     level not used by an already placed multi-day task on any visible day they
     both cover. The level is then locked for the rest of the pass.
  2. Single-day tasks, day by day in input order, backfill the lowest level
     left free that day by multi-day tasks and by earlier single-day tasks.

Levels are never compacted; a gap left by an ended bar stays visible.
"""

from __future__ import annotations

import datetime as dt
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .model import Task
from .util.dates import DateLike, start_of_day

LevelMap = Mapping[str, int]

# Running maximum before anything has been placed.
NO_LEVEL = -1


def task_span(task: Task) -> Tuple[dt.date, dt.date]:
    return start_of_day(task.start_date), start_of_day(task.end_date)


def is_task_on_day(task: Task, day: DateLike) -> bool:
    """True iff `day` falls within the task's inclusive [start, end] day range."""
    d = start_of_day(day)
    start, end = task_span(task)
    return start <= d <= end


def split_by_duration(tasks: Iterable[Task]) -> Tuple[List[Task], List[Task]]:
    """(multi_day, single_day), both in input order."""
    multi: List[Task] = []
    single: List[Task] = []
    for t in tasks:
        (multi if t.is_multi_day else single).append(t)
    return multi, single


def _multi_day_order(tasks: Sequence[Task]) -> List[Task]:
    # sorted() is stable: full ties keep input order.
    def key(t: Task) -> Tuple[dt.date, int]:
        return start_of_day(t.start_date), -t.duration_days

    return sorted(tasks, key=key)


def _covered_days(days: Sequence[dt.date], start: dt.date, end: dt.date) -> List[dt.date]:
    return [d for d in days if start <= d <= end]


def assign_multi_day_levels(
    days: Sequence[DateLike],
    tasks: Sequence[Task],
    current_max: int = NO_LEVEL,
) -> Tuple[Dict[str, int], int]:
    """Phase 1: lock a level for every multi-day task in `tasks`.

    Single-day tasks in `tasks` are ignored. Returns (levels, current_max).
    """
    visible = [start_of_day(d) for d in days]
    multi, _single = split_by_duration(tasks)

    levels: Dict[str, int] = {}
    # level -> visible days already held at that level by locked tasks
    held: Dict[int, Set[dt.date]] = {}

    for task in _multi_day_order(multi):
        if task.id in levels:
            continue
        start, end = task_span(task)
        covered = _covered_days(visible, start, end)

        assigned: Optional[int] = None
        for level in range(0, current_max + 2):
            taken = held.get(level)
            if not taken or not any(d in taken for d in covered):
                assigned = level
                break
        if assigned is None:
            assigned = current_max + 1

        levels[task.id] = assigned
        held.setdefault(assigned, set()).update(covered)
        current_max = max(current_max, assigned)

    return levels, current_max


def assign_single_day_levels(
    days: Sequence[DateLike],
    tasks: Sequence[Task],
    locked: Mapping[str, int],
    current_max: int = NO_LEVEL,
) -> Tuple[Dict[str, int], int]:
    """Phase 2: fill single-day tasks into the levels left free on their day.

    `locked` holds the multi-day levels from phase 1. Tasks are taken in input
    order per day, so ties resolve by the order the caller filtered them in.
    Returns (levels for single-day tasks only, current_max).
    """
    multi, single = split_by_duration(tasks)
    locked_spans = [(task_span(t), locked[t.id]) for t in multi if t.id in locked]

    levels: Dict[str, int] = {}
    for raw_day in days:
        day = start_of_day(raw_day)

        occupied: Set[int] = {lvl for (start, end), lvl in locked_spans if start <= day <= end}
        claimed: Set[int] = set()

        for task in single:
            if not is_task_on_day(task, day):
                continue
            if task.id in levels or task.id in locked:
                continue

            assigned: Optional[int] = None
            for level in range(0, current_max + 1):
                if level not in occupied and level not in claimed:
                    assigned = level
                    break
            if assigned is None:
                assigned = current_max + 1
                current_max = assigned

            claimed.add(assigned)
            levels[task.id] = assigned

    return levels, current_max


def assign_levels(days: Sequence[DateLike], tasks: Sequence[Task]) -> LevelMap:
    """Compute the level of every task for one pass over `days`.

    The result is a fresh read-only mapping of task id -> level.
    """
    multi_levels, current_max = assign_multi_day_levels(days, tasks, NO_LEVEL)
    single_levels, _current_max = assign_single_day_levels(days, tasks, multi_levels, current_max)

    out: Dict[str, int] = dict(multi_levels)
    out.update(single_levels)
    return MappingProxyType(out)


def max_level(levels: LevelMap) -> int:
    return max(levels.values(), default=NO_LEVEL)


__all__ = [
    "LevelMap",
    "NO_LEVEL",
    "task_span",
    "is_task_on_day",
    "split_by_duration",
    "assign_multi_day_levels",
    "assign_single_day_levels",
    "assign_levels",
    "max_level",
]
