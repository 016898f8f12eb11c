# lanecal/render/text.py
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from ..model import TaskWithMetadata
from ..planner import MonthView
from ..util.dates import format_smart_date


def _slot_line(level: int, item: Optional[TaskWithMetadata]) -> str:
    if item is None:
        return f"  L{level} -"
    left = "[" if item.is_start else "<"
    right = "]" if item.is_end else ""
    tail = " >>" if item.is_continue else ""
    return f"  L{level} {left}{item.name}{right} ({item.category}){tail}"


def render_agenda(view: MonthView, *, today: Optional[dt.date] = None) -> str:
    """Plain-text agenda: days with tasks, one line per level slot."""
    lines: List[str] = [view.month.strftime("%B %Y")]
    for cell in view.cells:
        if not cell.tasks:
            continue
        lines.append(f"{cell.day.isoformat()} {format_smart_date(cell.day, today)}")
        for level, item in enumerate(cell.rows()):
            lines.append(_slot_line(level, item))
    if len(lines) == 1:
        lines.append("  (no tasks)")
    return "\n".join(lines) + "\n"
