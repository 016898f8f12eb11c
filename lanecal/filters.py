# lanecal/filters.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .model import CATEGORIES, Task, normalize_category
from .util.dates import add_weeks, start_of_day

# None = no time restriction; otherwise weeks from today.
TIME_FILTER_CHOICES: Tuple[Optional[int], ...] = (None, 1, 2, 3)


def _matches_search(task: Task, query: str) -> bool:
    q = (query or "").strip().lower()
    if not q:
        return True
    return q in (task.name or "").lower()


def _normalize_selection(categories: Iterable[str]) -> FrozenSet[str]:
    # "ToDo", "in_progress" and the like select the stored literal.
    return frozenset(c for c in (normalize_category(v) for v in categories) if c)


def _matches_time(task: Task, horizon: Optional[dt.date]) -> bool:
    if horizon is None:
        return True
    return start_of_day(task.start_date) <= horizon


def filter_tasks(
    tasks: Iterable[Task],
    search_query: str,
    selected_categories: AbstractSet[str],
    time_filter: Optional[int],
    *,
    today: Optional[dt.date] = None,
) -> List[Task]:
    """Reduce `tasks` to those matching search, category and time criteria.

    An empty category selection shows nothing. Categories are matched after
    normalization, so "ToDo" selects "To Do" tasks. A time filter of `w` weeks keeps
    tasks that start on or before today + w weeks, however long they run.
    Input order is preserved.
    """
    selected = _normalize_selection(selected_categories)
    if not selected:
        return []

    horizon: Optional[dt.date] = None
    if time_filter is not None:
        horizon = add_weeks(today or dt.date.today(), int(time_filter))

    out: List[Task] = []
    for task in tasks:
        if not _matches_search(task, search_query):
            continue
        if task.category not in selected:
            continue
        if not _matches_time(task, horizon):
            continue
        out.append(task)
    return out


@dataclass(frozen=True)
class TaskFilter:
    search: str = ""
    categories: FrozenSet[str] = frozenset(CATEGORIES)
    weeks: Optional[int] = None

    @classmethod
    def all(cls) -> "TaskFilter":
        return cls()

    def apply(self, tasks: Sequence[Task], today: Optional[dt.date] = None) -> List[Task]:
        return filter_tasks(tasks, self.search, self.categories, self.weeks, today=today)


def toggle_category(selected: AbstractSet[str], category: str) -> FrozenSet[str]:
    category = normalize_category(category) or category
    if category in selected:
        return frozenset(c for c in selected if c != category)
    return frozenset(selected) | {category}


def category_summary(selected: AbstractSet[str]) -> str:
    n = len(selected)
    if n == len(CATEGORIES):
        return "All Categories"
    if n == 0:
        return "No Categories"
    return f"{n} Selected"


__all__ = [
    "TIME_FILTER_CHOICES",
    "filter_tasks",
    "TaskFilter",
    "toggle_category",
    "category_summary",
]
