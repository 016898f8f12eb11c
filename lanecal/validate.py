"""Task edit validation (form boundary)."""

from __future__ import annotations

import datetime as dt
from typing import Any, List

from .model import CATEGORIES


class TaskValidationError(ValueError):
    """Raised when a task edit fails validation."""


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_task_fields(name: Any, category: Any, start: Any, end: Any, *, label: str = "task") -> List[str]:
    errs: List[str] = []
    _require(isinstance(name, str) and bool(name.strip()), f"{label}: name must be non-empty string", errs)
    _require(category in CATEGORIES, f"{label}: category must be one of {', '.join(CATEGORIES)}", errs)
    _require(isinstance(start, dt.date), f"{label}: start date is required", errs)
    _require(isinstance(end, dt.date), f"{label}: end date is required", errs)
    return errs


def assert_valid_task_fields(name: Any, category: Any, start: Any, end: Any, *, label: str = "task") -> None:
    errs = validate_task_fields(name, category, start, end, label=label)
    if errs:
        raise TaskValidationError("; ".join(errs))
