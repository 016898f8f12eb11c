from __future__ import annotations

import datetime as dt
import unittest

from lanecal.filters import TaskFilter
from lanecal.model import IN_PROGRESS, REVIEW, TODO, Task
from lanecal.planner import (
    DaySelection,
    build_month_view,
    click_day,
    create_task,
    delete_task,
    find_task,
    new_task_id,
    relocate,
    update_task,
)
from lanecal.util.dates import MONDAY
from lanecal.validate import TaskValidationError

NOW = dt.datetime(2026, 10, 19, 8, 15, 2, 123000, tzinfo=dt.timezone.utc)


def _d(day: int, month: int = 10) -> dt.date:
    return dt.date(2026, month, day)


def _t(tid: str, start: dt.date, end: dt.date, name: str = "task", category: str = TODO) -> Task:
    return Task(id=tid, name=name, category=category, start_date=start, end_date=end)


class TestRelocateContract(unittest.TestCase):
    def test_relocate_preserves_duration_and_fields(self) -> None:
        tasks = (_t("a", _d(3), _d(7), name="Sprint", category=REVIEW), _t("b", _d(1), _d(1)))
        out = relocate(tasks, "a", _d(20))

        moved = find_task(out, "a")
        self.assertIsNotNone(moved)
        self.assertEqual(moved.start_date, _d(20))
        self.assertEqual(moved.end_date, _d(24))
        self.assertEqual((moved.id, moved.name, moved.category), ("a", "Sprint", REVIEW))
        self.assertEqual(out[1], tasks[1])
        # Input is left untouched.
        self.assertEqual(tasks[0].start_date, _d(3))

    def test_relocate_across_month_boundary(self) -> None:
        out = relocate([_t("a", _d(1), _d(4))], "a", _d(29))
        self.assertEqual((out[0].start_date, out[0].end_date), (_d(29), _d(1, 11)))

    def test_relocate_normalizes_target_day(self) -> None:
        out = relocate([_t("a", _d(1), _d(1))], "a", dt.datetime(2026, 10, 9, 18, 30))
        self.assertEqual((out[0].start_date, out[0].end_date), (_d(9), _d(9)))

    def test_relocate_unknown_id_is_noop(self) -> None:
        tasks = [_t("a", _d(1), _d(2))]
        self.assertEqual(relocate(tasks, "nope", _d(10)), tuple(tasks))

    def test_relocate_duration_property(self) -> None:
        for span in (0, 1, 5, 30):
            tasks = [_t("x", _d(2), _d(2) + dt.timedelta(days=span))]
            for target in (_d(1), _d(15), _d(31), _d(28, 2)):
                (moved,) = relocate(tasks, "x", target)
                self.assertEqual((moved.end_date - moved.start_date).days, span)


    def test_relocate_keeps_whole_day_length_of_noisy_task(self) -> None:
        noisy = Task(id="n", name="noisy", category=TODO,
                     start_date=dt.datetime(2026, 10, 3, 15, 30), end_date=dt.datetime(2026, 10, 4, 0, 5))
        (moved,) = relocate([noisy], "n", _d(10))
        self.assertEqual((moved.start_date, moved.end_date), (_d(10), _d(11)))


class TestTaskEditingContract(unittest.TestCase):
    def test_new_task_id_is_timestamp(self) -> None:
        self.assertEqual(new_task_id([], now=NOW), "2026-10-19T08:15:02.123Z")

    def test_new_task_id_avoids_collisions(self) -> None:
        base = "2026-10-19T08:15:02.123Z"
        self.assertEqual(new_task_id([base], now=NOW), base + "-2")
        self.assertEqual(new_task_id([base, base + "-2"], now=NOW), base + "-3")

    def test_create_task_swaps_reversed_dates(self) -> None:
        tasks, task = create_task((), name="  Launch ", category=IN_PROGRESS, start=_d(9), end=_d(4), now=NOW)
        self.assertEqual(tasks, (task,))
        self.assertEqual(task.name, "Launch")
        self.assertEqual((task.start_date, task.end_date), (_d(4), _d(9)))
        self.assertEqual(task.id, "2026-10-19T08:15:02.123Z")

    def test_create_task_ids_unique_within_same_instant(self) -> None:
        tasks, first = create_task((), name="one", category=TODO, start=_d(1), end=_d(1), now=NOW)
        tasks, second = create_task(tasks, name="two", category=TODO, start=_d(1), end=_d(1), now=NOW)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(tasks), 2)

    def test_create_task_rejects_invalid_input(self) -> None:
        with self.assertRaises(TaskValidationError):
            create_task((), name="   ", category=TODO, start=_d(1), end=_d(1))
        with self.assertRaises(TaskValidationError):
            create_task((), name="x", category="Someday", start=_d(1), end=_d(1))
        with self.assertRaises(TaskValidationError):
            create_task((), name="x", category=TODO, start=None, end=_d(1))

    def test_compact_category_spellings_are_stored_as_literals(self) -> None:
        tasks, task = create_task((), name="x", category="ToDo", start=_d(1), end=_d(1), now=NOW)
        self.assertEqual(task.category, TODO)

        out = update_task(tasks, task.id, category="InProgress")
        self.assertEqual(out[0].category, IN_PROGRESS)
        with self.assertRaises(TaskValidationError):
            update_task(tasks, task.id, category="Someday")

    def test_update_task_keeps_identity(self) -> None:
        tasks = (_t("a", _d(1), _d(3), name="Old"), _t("b", _d(5), _d(5)))
        out = update_task(tasks, "a", name="New", end=_d(10))
        self.assertEqual(out[0].id, "a")
        self.assertEqual(out[0].name, "New")
        self.assertEqual((out[0].start_date, out[0].end_date), (_d(1), _d(10)))
        self.assertEqual(out[1], tasks[1])

    def test_update_task_swaps_and_validates(self) -> None:
        tasks = (_t("a", _d(5), _d(8)),)
        out = update_task(tasks, "a", start=_d(12))
        self.assertEqual((out[0].start_date, out[0].end_date), (_d(8), _d(12)))
        with self.assertRaises(TaskValidationError):
            update_task(tasks, "a", name="")

    def test_update_and_delete_unknown_id_are_noops(self) -> None:
        tasks = (_t("a", _d(5), _d(8)),)
        self.assertEqual(update_task(tasks, "zzz", name="x"), tasks)
        self.assertEqual(delete_task(tasks, "zzz"), tasks)

    def test_delete_task(self) -> None:
        tasks = (_t("a", _d(5), _d(8)), _t("b", _d(1), _d(1)))
        self.assertEqual(delete_task(tasks, "a"), (tasks[1],))


class TestDaySelectionContract(unittest.TestCase):
    def test_two_clicks_complete_a_range(self) -> None:
        sel = DaySelection()
        self.assertFalse(sel.complete)

        sel = click_day(sel, _d(12))
        self.assertEqual((sel.start, sel.end), (_d(12), None))
        self.assertIsNone(sel.span())

        sel = click_day(sel, dt.datetime(2026, 10, 9, 11, 0))
        self.assertTrue(sel.complete)
        self.assertEqual(sel.span(), (_d(9), _d(12)))

        sel = click_day(sel, _d(20))
        self.assertEqual((sel.start, sel.end), (_d(20), None))


class TestMonthViewContract(unittest.TestCase):
    def test_month_view_grid_and_levels(self) -> None:
        tasks = [
            _t("A", _d(1), _d(5), name="Alpha"),
            _t("B", _d(3), _d(4), name="Beta"),
            _t("C", _d(3), _d(3), name="Gamma"),
        ]
        view = build_month_view(tasks, _d(17), today=_d(19))
        self.assertEqual(view.month, _d(1))
        self.assertEqual(view.days[0], _d(27, 9))
        self.assertEqual(view.days[-1], _d(31))
        self.assertEqual(len(view.cells), 35)
        self.assertEqual(dict(view.levels), {"A": 0, "B": 1, "C": 2})
        self.assertEqual(view.max_level, 2)

    def test_month_view_applies_filter_before_levels(self) -> None:
        tasks = [_t("A", _d(1), _d(5), name="Alpha"), _t("B", _d(3), _d(4), name="Beta")]
        view = build_month_view(tasks, _d(1), task_filter=TaskFilter(search="beta"), week_start=MONDAY, today=_d(1))
        self.assertEqual([t.id for t in view.tasks], ["B"])
        self.assertEqual(dict(view.levels), {"B": 0})
        self.assertEqual(view.days[0], _d(28, 9))
        self.assertEqual(view.days[-1], _d(1, 11))

    def test_month_view_empty_category_selection(self) -> None:
        view = build_month_view([_t("A", _d(1), _d(5))], _d(1), task_filter=TaskFilter(categories=frozenset()))
        self.assertEqual(view.tasks, ())
        self.assertEqual(view.max_level, -1)
        self.assertTrue(all(not c.tasks for c in view.cells))


if __name__ == "__main__":
    unittest.main(verbosity=2)
