"""lanecal.api

Stable *library* entrypoint for lanecal.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from lanecal.filters import TaskFilter, category_summary, filter_tasks, toggle_category
from lanecal.levels import assign_levels, is_task_on_day
from lanecal.model import CATEGORIES, DayWithTasks, Task, TaskWithMetadata
from lanecal.planner import (
    DaySelection,
    MonthView,
    build_month_view,
    click_day,
    create_task,
    delete_task,
    relocate,
    update_task,
)
from lanecal.projection import days_with_tasks, project_days, tasks_for_day
from lanecal.store import TaskStore, load_tasks, save_tasks
from lanecal.util.dates import month_grid_days
from lanecal.validate import TaskValidationError


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    "CATEGORIES",
    "DaySelection",
    "DayWithTasks",
    "MonthView",
    "Task",
    "TaskFilter",
    "TaskStore",
    "TaskValidationError",
    "TaskWithMetadata",
    "assign_levels",
    "build_month_view",
    "category_summary",
    "click_day",
    "create_task",
    "days_with_tasks",
    "delete_task",
    "filter_tasks",
    "is_task_on_day",
    "load_tasks",
    "month_grid_days",
    "project_days",
    "relocate",
    "save_tasks",
    "tasks_for_day",
    "toggle_category",
    "update_task",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
