from __future__ import annotations

import argparse
import datetime as dt
import os
import sys
import webbrowser
from pathlib import Path
from typing import FrozenSet, List, Optional

from .config import DEFAULT_OUT, load_config, parse_week_start, setup_logging
from .filters import TIME_FILTER_CHOICES, TaskFilter
from .model import CATEGORIES, normalize_category
from .planner import build_month_view, create_task, delete_task, find_task, relocate, update_task
from .render.inline import build_html
from .render.text import render_agenda
from .store import TaskStore
from .util.console import eprint, warn
from .util.dates import MONDAY, month_start, parse_date_yyyy_mm_dd, parse_month_yyyy_mm
from .util.tz import normalize_tz_name, resolve_tz, today_date
from .validate import TaskValidationError


def _parse_day(value: Optional[str], flag: str) -> Optional[dt.date]:
    if value is None:
        return None
    try:
        return parse_date_yyyy_mm_dd(value)
    except ValueError:
        raise SystemExit(f"Invalid {flag} value: {value!r} (expected YYYY-MM-DD)")


def _parse_category(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cat = normalize_category(value)
    if cat is None:
        raise SystemExit(f"Invalid --category value: {value!r} (one of: {', '.join(CATEGORIES)})")
    return cat


def _open_store(args: argparse.Namespace) -> tuple[TaskStore, dt.tzinfo]:
    try:
        tzinfo = resolve_tz(normalize_tz_name(args.tz))
    except ValueError as e:
        raise SystemExit(f"Invalid --tz value: {e}")
    return TaskStore(Path(args.store).expanduser(), tz=tzinfo), tzinfo


def _save(store: TaskStore, tasks) -> int:
    if not store.save(tasks):
        eprint(f"[lanecal] ERROR: failed to save tasks to {store.path}")
        return 1
    return 0


def _selected_categories(args: argparse.Namespace) -> FrozenSet[str]:
    if args.none:
        return frozenset()
    if not args.category:
        return frozenset(CATEGORIES)
    return frozenset(c for c in (_parse_category(v) for v in args.category) if c)


def cmd_show(args: argparse.Namespace) -> int:
    store, tzinfo = _open_store(args)
    today = today_date(tzinfo)

    if args.month:
        try:
            month = parse_month_yyyy_mm(args.month)
        except ValueError as e:
            raise SystemExit(f"Invalid --month value: {e}")
    else:
        month = month_start(today)

    try:
        week_start = parse_week_start(args.week_start)
    except ValueError as e:
        raise SystemExit(f"Invalid --week-start value: {e}")

    flt = TaskFilter(search=args.search or "", categories=_selected_categories(args), weeks=args.weeks)
    view = build_month_view(store.load(), month, task_filter=flt, week_start=week_start, today=today)

    if args.text:
        sys.stdout.write(render_agenda(view, today=today))
        return 0

    html = build_html(view, today=today)

    out_path = os.path.abspath(args.out)
    try:
        Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        # Default relative path from an unwritable CWD: fall back to the user's home.
        if args.out == DEFAULT_OUT:
            fallback = Path.home() / ".lanecal" / "build" / "lanecal_month.html"
            fallback.parent.mkdir(parents=True, exist_ok=True)
            out_path = str(fallback)
            warn(f"default output directory is not writable; using {out_path}")
        else:
            raise SystemExit(f"Cannot create output directory '{Path(out_path).parent}': {e}")
    except OSError as e:
        raise SystemExit(f"Cannot create output directory '{Path(out_path).parent}': {e}")
    try:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(html)
    except OSError as e:
        raise SystemExit(f"Cannot write output file '{out_path}': {e}")

    print(out_path)

    if not args.no_open:
        try:
            webbrowser.open("file://" + out_path)
        except Exception:
            pass
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    store, _tz = _open_store(args)
    for t in store.load():
        print(f"{t.id}\t{t.start_date.isoformat()}..{t.end_date.isoformat()}\t{t.category}\t{t.name}")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    store, _tz = _open_store(args)
    start = _parse_day(args.start, "--start")
    end = _parse_day(args.end, "--end") if args.end else start
    category = _parse_category(args.category) or args.default_category
    try:
        tasks, task = create_task(store.load(), name=args.name, category=category, start=start, end=end)
    except TaskValidationError as e:
        raise SystemExit(f"Invalid task: {e}")
    rc = _save(store, tasks)
    if rc == 0:
        print(task.id)
    return rc


def cmd_edit(args: argparse.Namespace) -> int:
    store, _tz = _open_store(args)
    tasks = store.load()
    if find_task(tasks, args.id) is None:
        warn(f"no task with id {args.id!r}; nothing changed")
        return 0
    try:
        tasks = update_task(
            tasks,
            args.id,
            name=args.name,
            category=_parse_category(args.category),
            start=_parse_day(args.start, "--start"),
            end=_parse_day(args.end, "--end"),
        )
    except TaskValidationError as e:
        raise SystemExit(f"Invalid task: {e}")
    return _save(store, tasks)


def cmd_move(args: argparse.Namespace) -> int:
    store, _tz = _open_store(args)
    tasks = store.load()
    if find_task(tasks, args.id) is None:
        warn(f"no task with id {args.id!r}; nothing changed")
        return 0
    return _save(store, relocate(tasks, args.id, _parse_day(args.day, "DAY")))


def cmd_delete(args: argparse.Namespace) -> int:
    store, _tz = _open_store(args)
    tasks = store.load()
    if find_task(tasks, args.id) is None:
        warn(f"no task with id {args.id!r}; nothing changed")
        return 0
    return _save(store, delete_task(tasks, args.id))


def build_parser() -> argparse.ArgumentParser:
    try:
        cfg = load_config()
    except ValueError as e:
        raise SystemExit(f"Invalid environment configuration: {e}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--store",
        default=str(cfg.store_path),
        help="Task store JSON path (default: env LANECAL_STORE or ~/.lanecal/tasks.json)",
    )
    common.add_argument(
        "--tz",
        default=cfg.tz,
        help="Timezone for day boundaries (default: env LANECAL_TZ or 'local')",
    )

    ap = argparse.ArgumentParser(prog="lanecal", description="Month-grid calendar task planner.")
    ap.set_defaults(log_level=cfg.log_level, default_category=cfg.default_category)
    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("show", parents=[common], help="Render a month grid")
    sp.add_argument("--month", default=None, help="Month YYYY-MM (default: current month in --tz)")
    sp.add_argument("--search", default="", help="Case-insensitive task name filter")
    sp.add_argument("--category", action="append", default=None, help="Category to show (repeatable; default: all)")
    sp.add_argument("--none", action="store_true", help="Select no categories (shows an empty grid)")
    sp.add_argument(
        "--weeks",
        type=int,
        default=None,
        choices=[w for w in TIME_FILTER_CHOICES if w is not None],
        help="Only tasks starting within N weeks from today",
    )
    sp.add_argument(
        "--week-start",
        default="monday" if cfg.week_start == MONDAY else "sunday",
        help="First weekday of the grid: sunday|monday (default: env LANECAL_WEEK_START or sunday)",
    )
    sp.add_argument("--text", action="store_true", help="Print a text agenda instead of writing HTML")
    sp.add_argument("--out", default=cfg.out_path, help=f"Output HTML path (default: env LANECAL_OUT or ./{DEFAULT_OUT})")
    sp.add_argument("--no-open", action="store_true", help="Do not open the generated HTML in a browser")
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("list", parents=[common], help="List stored tasks")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("add", parents=[common], help="Create a task")
    sp.add_argument("name")
    sp.add_argument("--start", required=True, help="Start day YYYY-MM-DD")
    sp.add_argument("--end", default=None, help="End day YYYY-MM-DD (default: start day)")
    sp.add_argument("--category", default=None, help=f"One of: {', '.join(CATEGORIES)}")
    sp.set_defaults(func=cmd_add)

    sp = sub.add_parser("edit", parents=[common], help="Edit a task")
    sp.add_argument("id")
    sp.add_argument("--name", default=None)
    sp.add_argument("--category", default=None)
    sp.add_argument("--start", default=None)
    sp.add_argument("--end", default=None)
    sp.set_defaults(func=cmd_edit)

    sp = sub.add_parser("move", parents=[common], help="Move a task to start on DAY, keeping its length")
    sp.add_argument("id")
    sp.add_argument("day", help="Target day YYYY-MM-DD")
    sp.set_defaults(func=cmd_move)

    sp = sub.add_parser("delete", parents=[common], help="Delete a task")
    sp.add_argument("id")
    sp.set_defaults(func=cmd_delete)

    return ap


def main(argv: List[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logging(args.log_level)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
