# lanecal/util/dates.py
from __future__ import annotations

import datetime as dt
import re
from typing import List, Optional, Union

from .tz import resolve_tz

DateLike = Union[dt.date, dt.datetime]

SUNDAY = 6
MONDAY = 0
WEEK_STARTS = {"sunday": SUNDAY, "monday": MONDAY}

_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")


def start_of_day(value: DateLike) -> dt.date:
    """Drop the time-of-day part. datetime is a date subclass, so check it first."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


def add_days(d: DateLike, n: int) -> dt.date:
    return start_of_day(d) + dt.timedelta(days=int(n))


def add_weeks(d: DateLike, n: int) -> dt.date:
    return start_of_day(d) + dt.timedelta(weeks=int(n))


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (start_of_day(end) - start_of_day(start)).days


def month_start(d: DateLike) -> dt.date:
    return start_of_day(d).replace(day=1)


def month_end(d: DateLike) -> dt.date:
    first = month_start(d)
    return shift_month(first, 1) - dt.timedelta(days=1)


def shift_month(d: DateLike, n: int) -> dt.date:
    """First day of the month `n` months away from the month of `d`."""
    first = month_start(d)
    idx = first.year * 12 + (first.month - 1) + int(n)
    return dt.date(idx // 12, idx % 12 + 1, 1)


def week_start_of(d: DateLike, week_start: int = SUNDAY) -> dt.date:
    day = start_of_day(d)
    back = (day.weekday() - week_start) % 7
    return day - dt.timedelta(days=back)


def week_end_of(d: DateLike, week_start: int = SUNDAY) -> dt.date:
    return week_start_of(d, week_start) + dt.timedelta(days=6)


def month_grid_days(month: DateLike, week_start: int = SUNDAY) -> List[dt.date]:
    """Every day shown by a month grid.

    From the first day of the week holding the 1st to the last day of the week
    holding the month's last day, so the result is always whole weeks.
    """
    first = week_start_of(month_start(month), week_start)
    last = week_end_of(month_end(month), week_start)
    return [first + dt.timedelta(days=i) for i in range((last - first).days + 1)]


def is_same_month(a: DateLike, b: DateLike) -> bool:
    da, db = start_of_day(a), start_of_day(b)
    return (da.year, da.month) == (db.year, db.month)


def is_selected_date(day: DateLike, selected: Optional[DateLike]) -> bool:
    if selected is None:
        return False
    return start_of_day(day) == start_of_day(selected)


def format_smart_date(d: Optional[DateLike], today: Optional[dt.date] = None) -> str:
    """Today / Tomorrow / Yesterday, otherwise e.g. "Oct 3, 2026"."""
    if d is None:
        return "Today"
    today = today or dt.date.today()
    day = start_of_day(d)
    diff = (day - today).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if diff == -1:
        return "Yesterday"
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s.strip(), "%Y-%m-%d").date()


def parse_month_yyyy_mm(s: str) -> dt.date:
    m = _MONTH_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid month (expected YYYY-MM): {s!r}")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month (expected YYYY-MM): {s!r}")
    return dt.date(year, month, 1)


def parse_iso_day(value: str, tz: Optional[dt.tzinfo] = None) -> dt.date:
    """Parse an ISO date or date-time string down to its calendar day.

    Aware date-times are converted into `tz` (local by default) before the
    time-of-day is dropped. Naive values are taken as already local.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid ISO date: {value!r}")
    s = value.strip()
    if s.endswith("Z") or s.endswith("z"):
        s = s[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(s)
    except ValueError:
        return dt.date.fromisoformat(s)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz or resolve_tz("local"))
    return parsed.date()
