from __future__ import annotations

import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from lanecal.model import COMPLETED, REVIEW, TODO, Task
from lanecal.store import STORAGE_KEY, TaskStore, load_tasks, loads_tasks, save_tasks

UTC = dt.timezone.utc


def _sample() -> list[Task]:
    return [
        Task(id="2026-10-01T09:00:00.000Z", name="Sprint Planning", category=TODO,
             start_date=dt.date(2026, 10, 5), end_date=dt.date(2026, 10, 9)),
        Task(id="x-2", name="Release", category=COMPLETED,
             start_date=dt.date(2026, 10, 12), end_date=dt.date(2026, 10, 12)),
    ]


class TestTaskStoreContract(unittest.TestCase):
    def test_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "nested" / "tasks.json"
            self.assertTrue(save_tasks(path, _sample()))
            self.assertEqual(load_tasks(path, tz=UTC), _sample())

    def test_round_trip_normalizes_time_of_day(self) -> None:
        noisy = Task(id="n", name="Noisy", category=REVIEW,
                     start_date=dt.datetime(2026, 10, 3, 14, 30), end_date=dt.datetime(2026, 10, 4, 9, 0))
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            save_tasks(path, [noisy])
            (got,) = load_tasks(path, tz=UTC)
        self.assertEqual((got.start_date, got.end_date), (dt.date(2026, 10, 3), dt.date(2026, 10, 4)))

    def test_saved_layout(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            save_tasks(path, _sample()[:1])
            obj = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(
            obj,
            {
                STORAGE_KEY: [
                    {
                        "id": "2026-10-01T09:00:00.000Z",
                        "name": "Sprint Planning",
                        "category": "To Do",
                        "startDate": "2026-10-05T00:00:00",
                        "endDate": "2026-10-09T00:00:00",
                    }
                ]
            },
        )

    def test_missing_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            self.assertEqual(load_tasks(Path(td) / "absent.json"), [])

    def test_malformed_json_is_empty_and_logged(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("lanecal.store", level="ERROR") as logs:
                self.assertEqual(load_tasks(path), [])
        self.assertIn("Failed to load tasks", logs.output[0])

    def test_wrong_shape_is_empty_and_logged(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            path.write_text(json.dumps({STORAGE_KEY: {"id": "a"}}), encoding="utf-8")
            with self.assertLogs("lanecal.store", level="ERROR"):
                self.assertEqual(load_tasks(path), [])

    def test_blank_file_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            path.write_text("  \n", encoding="utf-8")
            self.assertEqual(load_tasks(path), [])

    def test_bare_list_and_lenient_records(self) -> None:
        raw = json.dumps(
            [
                {"id": "a", "name": "A", "category": "ToDo",
                 "startDate": "2026-10-09T00:00:00.000Z", "endDate": "2026-10-03T00:00:00.000Z"},
                {"id": "b", "name": "B", "category": "InProgress",
                 "startDate": "2026-10-05", "endDate": "2026-10-05T18:00:00"},
                {"id": 17, "name": "C", "category": "Review", "startDate": "2026-10-01", "endDate": "2026-10-01"},
            ]
        )
        got = loads_tasks(raw, tz=UTC)
        self.assertEqual([t.id for t in got], ["a", "b", "17"])
        self.assertEqual((got[0].start_date, got[0].end_date), (dt.date(2026, 10, 3), dt.date(2026, 10, 9)))
        self.assertEqual(got[0].category, "To Do")
        self.assertEqual(got[1].category, "In Progress")
        self.assertEqual(got[1].end_date, dt.date(2026, 10, 5))

    def test_bad_records_are_skipped_with_warning(self) -> None:
        raw = json.dumps(
            {
                STORAGE_KEY: [
                    "junk",
                    {"name": "no id", "category": "Review", "startDate": "2026-10-01", "endDate": "2026-10-01"},
                    {"id": "c", "name": "bad cat", "category": "Someday", "startDate": "2026-10-01", "endDate": "2026-10-01"},
                    {"id": "d", "name": "bad date", "category": "Review", "startDate": "soon", "endDate": "2026-10-01"},
                    {"id": "ok", "name": "fine", "category": "Review", "startDate": "2026-10-01", "endDate": "2026-10-02"},
                ]
            }
        )
        with self.assertLogs("lanecal.store", level="WARNING") as logs:
            got = loads_tasks(raw)
        self.assertEqual([t.id for t in got], ["ok"])
        self.assertEqual(len(logs.output), 4)

    def test_out_of_range_date_is_skipped_not_raised(self) -> None:
        raw = json.dumps(
            [
                {"id": "edge", "name": "Edge", "category": "Review",
                 "startDate": "9999-12-31T23:00:00-05:00", "endDate": "9999-12-31T23:00:00-05:00"},
                {"id": "ok", "name": "fine", "category": "Review", "startDate": "2026-10-01", "endDate": "2026-10-01"},
            ]
        )
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "tasks.json"
            path.write_text(raw, encoding="utf-8")
            with self.assertLogs("lanecal.store", level="WARNING") as logs:
                got = load_tasks(path, tz=UTC)
        self.assertEqual([t.id for t in got], ["ok"])
        self.assertIn("edge", logs.output[0])

    def test_save_failure_is_logged_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            blocker = Path(td) / "file"
            blocker.write_text("x", encoding="utf-8")
            with self.assertLogs("lanecal.store", level="ERROR"):
                self.assertFalse(save_tasks(blocker / "tasks.json", _sample()))

            with patch("lanecal.store.dumps_tasks", side_effect=TypeError("boom")):
                with self.assertLogs("lanecal.store", level="ERROR") as logs:
                    self.assertFalse(save_tasks(Path(td) / "tasks.json", _sample()))
            self.assertIn("boom", logs.output[0])
            self.assertFalse((Path(td) / "tasks.json").exists())

    def test_save_replaces_previous_content(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = TaskStore(Path(td) / "tasks.json", tz=UTC)
            self.assertTrue(store.save(_sample()))
            self.assertTrue(store.save(_sample()[1:]))
            self.assertEqual(store.load(), _sample()[1:])
            leftovers = [p.name for p in Path(td).iterdir() if p.name != "tasks.json"]
            self.assertEqual(leftovers, [])


if __name__ == "__main__":
    unittest.main(verbosity=2)
