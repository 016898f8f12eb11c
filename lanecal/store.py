# lanecal/store.py
"""Task persistence over a JSON file.

File layout:
  { "calendar-tasks": [ {"id", "name", "category", "startDate", "endDate"}, ... ] }

Dates are written as ISO-8601 date-times at midnight ("2026-10-19T00:00:00").
Loading never raises: a missing file is an empty task list, unreadable or
malformed content is logged and also yields an empty list. Individual bad
records are skipped with a warning.
"""

from __future__ import annotations

import datetime as dt
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import orjson

from .model import Task, normalize_category
from .util.dates import parse_iso_day, start_of_day

log = logging.getLogger(__name__)

STORAGE_KEY = "calendar-tasks"

StorePath = Union[str, Path]


def _iso_midnight(d: dt.date) -> str:
    return dt.datetime.combine(start_of_day(d), dt.time()).isoformat()


def task_to_record(task: Task) -> Dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "category": task.category,
        "startDate": _iso_midnight(task.start_date),
        "endDate": _iso_midnight(task.end_date),
    }


def tasks_to_records(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    return [task_to_record(t) for t in tasks]


def task_from_record(raw: Any, *, tz: Optional[dt.tzinfo] = None) -> Task:
    """Build a Task from one stored record. Raises ValueError on bad records."""
    if not isinstance(raw, dict):
        raise ValueError(f"record must be an object; got {type(raw).__name__}")

    tid = raw.get("id")
    if isinstance(tid, (int, float)) and not isinstance(tid, bool):
        tid = str(tid)
    if not isinstance(tid, str) or not tid:
        raise ValueError("record id must be a non-empty string")

    category = normalize_category(raw.get("category"))
    if category is None:
        raise ValueError(f"record {tid}: unknown category {raw.get('category')!r}")

    try:
        start = parse_iso_day(raw.get("startDate"), tz)  # type: ignore[arg-type]
        end = parse_iso_day(raw.get("endDate"), tz)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"record {tid}: invalid dates ({e})") from e
    if end < start:
        start, end = end, start

    name = raw.get("name")
    return Task(
        id=tid,
        name=name if isinstance(name, str) else "",
        category=category,
        start_date=start,
        end_date=end,
    )


def tasks_from_records(records: Iterable[Any], *, tz: Optional[dt.tzinfo] = None) -> List[Task]:
    out: List[Task] = []
    for i, raw in enumerate(records):
        try:
            out.append(task_from_record(raw, tz=tz))
        except ValueError as e:
            log.warning("Skipping stored task #%d: %s", i, e)
    return out


def dumps_tasks(tasks: Iterable[Task]) -> bytes:
    return orjson.dumps({STORAGE_KEY: tasks_to_records(tasks)}, option=orjson.OPT_INDENT_2)


def loads_tasks(data: Union[bytes, str], *, tz: Optional[dt.tzinfo] = None) -> List[Task]:
    """Parse stored content. Raises orjson.JSONDecodeError / ValueError on bad input."""
    obj = orjson.loads(data)
    if isinstance(obj, dict):
        obj = obj.get(STORAGE_KEY, [])
    if not isinstance(obj, list):
        raise ValueError(f"stored tasks must be a list; got {type(obj).__name__}")
    return tasks_from_records(obj, tz=tz)


def load_tasks(path: StorePath, *, tz: Optional[dt.tzinfo] = None) -> List[Task]:
    p = Path(path)
    if not p.exists():
        return []
    try:
        data = p.read_bytes()
    except OSError as e:
        log.error("Failed to read tasks from %s: %s", p, e)
        return []
    if not data.strip():
        return []
    try:
        return loads_tasks(data, tz=tz)
    except ValueError as e:
        # orjson.JSONDecodeError is a ValueError
        log.error("Failed to load tasks from %s: %s", p, e)
        return []


def save_tasks(path: StorePath, tasks: Iterable[Task]) -> bool:
    """Write tasks atomically. Returns False (after logging) instead of raising."""
    p = Path(path)
    try:
        data = dumps_tasks(tasks)
    except (TypeError, ValueError) as e:
        log.error("Failed to serialize tasks: %s", e)
        return False

    tmp_name: Optional[str] = None
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.write(b"\n")
        os.replace(tmp_name, p)
        tmp_name = None
    except OSError as e:
        log.error("Failed to save tasks to %s: %s", p, e)
        return False
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
    return True


class TaskStore:
    """File-backed task store bound to one path."""

    def __init__(self, path: StorePath, tz: Optional[dt.tzinfo] = None):
        self.path = Path(path)
        self.tz = tz

    def load(self) -> List[Task]:
        return load_tasks(self.path, tz=self.tz)

    def save(self, tasks: Iterable[Task]) -> bool:
        return save_tasks(self.path, tasks)


__all__ = [
    "STORAGE_KEY",
    "task_to_record",
    "tasks_to_records",
    "task_from_record",
    "tasks_from_records",
    "dumps_tasks",
    "loads_tasks",
    "load_tasks",
    "save_tasks",
    "TaskStore",
]
