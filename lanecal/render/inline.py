# lanecal/render/inline.py
from __future__ import annotations

import datetime as dt
import html
from typing import Any, Dict, List, Optional

import orjson

from ..model import DayWithTasks, TaskWithMetadata
from ..planner import MonthView
from ..util.dates import is_same_month
from .html_shell import HTML_SHELL

_MARKERS = ("__TITLE__", "__BODY_MARKUP__", "__DATA_JSON__")

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _category_class(category: str) -> str:
    return "cat-" + category.lower().replace(" ", "-")


def _lane_markup(item: Optional[TaskWithMetadata], row_start: bool) -> str:
    if item is None:
        return '<div class="lane empty"></div>'
    classes = ["lane", "task", _category_class(item.category)]
    if item.is_start:
        classes.append("start")
    if item.is_end:
        classes.append("end")
    if item.is_continue:
        classes.append("cont")
    # Bars show their label where they start and again at the start of each week row.
    label = html.escape(item.name) if item.is_start or row_start else "&nbsp;"
    return (
        f'<div class="{" ".join(classes)}" data-task-id="{html.escape(item.id, quote=True)}"'
        f' data-level="{item.level}">{label}</div>'
    )


def _cell_markup(cell: DayWithTasks, month: dt.date, today: Optional[dt.date], row_start: bool = False) -> str:
    classes = ["day"]
    if not is_same_month(cell.day, month):
        classes.append("other-month")
    if today is not None and cell.day == today:
        classes.append("today")
    lanes = "".join(_lane_markup(item, row_start) for item in cell.rows())
    return (
        f'<td class="{" ".join(classes)}" data-day="{cell.day.isoformat()}">'
        f'<time class="daynum" datetime="{cell.day.isoformat()}">{cell.day.day}</time>{lanes}</td>'
    )


def build_markup(view: MonthView, today: Optional[dt.date] = None) -> str:
    cells = list(view.cells)
    if not cells:
        return '<table class="month"></table>'
    first_weekday = cells[0].day.weekday()
    heads = "".join(f"<th>{WEEKDAY_LABELS[(first_weekday + i) % 7]}</th>" for i in range(7))

    rows: List[str] = []
    for i in range(0, len(cells), 7):
        week = cells[i : i + 7]
        rows.append("<tr>" + "".join(_cell_markup(c, view.month, today, j == 0) for j, c in enumerate(week)) + "</tr>")

    caption = view.month.strftime("%B %Y")
    return (
        f'<table class="month"><caption>{caption}</caption>'
        f"<thead><tr>{heads}</tr></thead><tbody>{''.join(rows)}</tbody></table>"
    )


def view_to_data(view: MonthView) -> Dict[str, Any]:
    """JSON-ready form of a month view (dates as YYYY-MM-DD)."""
    return {
        "month": view.month.isoformat(),
        "days": [d.isoformat() for d in view.days],
        "levels": dict(view.levels),
        "cells": [
            {
                "day": c.day.isoformat(),
                "tasks": [
                    {
                        "id": t.id,
                        "name": t.name,
                        "category": t.category,
                        "level": t.level,
                        "isStart": t.is_start,
                        "isEnd": t.is_end,
                        "isContinue": t.is_continue,
                    }
                    for t in c.tasks
                ],
            }
            for c in view.cells
        ],
    }


def build_html(view: MonthView, *, title: Optional[str] = None, today: Optional[dt.date] = None) -> str:
    # Hardening:
    #   - Shell must contain each placeholder exactly once.
    #   - Generated HTML must not contain a placeholder after injection.
    if not isinstance(view, MonthView):
        raise TypeError(f"view must be MonthView, got {type(view).__name__}")
    for marker in _MARKERS:
        n = HTML_SHELL.count(marker)
        if n != 1:
            raise RuntimeError(f"HTML_SHELL must contain {marker} exactly once (found {n})")

    data_json = orjson.dumps(view_to_data(view)).decode("utf-8")
    data_json = data_json.replace("</", r"<\/")  # script-safe injection

    page_title = html.escape(title or f"Calendar - {view.month.strftime('%B %Y')}")
    out = HTML_SHELL.replace("__TITLE__", page_title)
    out = out.replace("__BODY_MARKUP__", build_markup(view, today))
    out = out.replace("__DATA_JSON__", data_json)

    if "__DATA_JSON__" in out:
        raise RuntimeError("HTML generation failed: marker still present after injection")
    return out
