"""Tests for snapshot parsing in timetrack_core.state."""

import unittest
from datetime import datetime, timezone

from timetrack_core.state import (
    ControllerState, RunningEntry, TodaySnapshot, parse_timestamp,
)

from helpers import NOW, running_payload, today_payload


class TestParseTimestamp(unittest.TestCase):

    def test_z_suffix_is_utc(self):
        ts = parse_timestamp("2026-03-02T13:58:55.000Z")
        self.assertEqual(ts, datetime(2026, 3, 2, 13, 58, 55, tzinfo=timezone.utc))

    def test_offset_is_kept(self):
        ts = parse_timestamp("2026-03-02T19:00:00+05:00")
        self.assertEqual(ts, datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc))

    def test_naive_is_treated_as_utc(self):
        ts = parse_timestamp("2026-03-02T14:00:00")
        self.assertEqual(ts.tzinfo, timezone.utc)

    def test_garbage_raises(self):
        for bad in ("yesterday", "", None, 12345):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    parse_timestamp(bad)


class TestTodaySnapshot(unittest.TestCase):

    def test_empty_has_every_category_at_zero(self):
        snap = TodaySnapshot.empty()
        self.assertEqual(snap.totals, {"Python": 0, "SQL": 0, "Datasetu": 0, "Break": 0, "TT": 0})
        self.assertIsNone(snap.running_entry)
        self.assertFalse(snap.is_running)

    def test_from_payload_idle(self):
        snap = TodaySnapshot.from_payload(today_payload({"Python": 120, "SQL": 30}))
        self.assertEqual(snap.total_for("Python"), 120)
        self.assertEqual(snap.total_for("SQL"), 30)
        self.assertEqual(snap.total_for("TT"), 0)
        self.assertEqual(snap.completed_total, 150)
        self.assertIsNone(snap.running_entry)

    def test_from_payload_running(self):
        snap = TodaySnapshot.from_payload(
            today_payload({"SQL": 0}, running_payload("SQL", 65)))
        self.assertEqual(snap.running_entry,
                         RunningEntry("e1", "SQL", datetime(2026, 3, 2, 13, 58, 55, tzinfo=timezone.utc)))

    def test_missing_running_entry_key_means_idle(self):
        snap = TodaySnapshot.from_payload({"success": True, "totals": {}})
        self.assertIsNone(snap.running_entry)
        self.assertEqual(snap.completed_total, 0)

    def test_extra_categories_count_toward_total(self):
        snap = TodaySnapshot.from_payload(today_payload({"Python": 60, "Legacy": 40}))
        self.assertEqual(snap.total_for("Legacy"), 40)
        self.assertEqual(snap.completed_total, 100)

    def test_fractional_seconds_are_floored_and_negatives_clamped(self):
        snap = TodaySnapshot.from_payload(today_payload({"Python": 59.9, "SQL": -5}))
        self.assertEqual(snap.total_for("Python"), 59)
        self.assertEqual(snap.total_for("SQL"), 0)

    def test_success_false_is_rejected(self):
        with self.assertRaises(ValueError) as ctx:
            TodaySnapshot.from_payload({"success": False, "error": "db down"})
        self.assertIn("db down", str(ctx.exception))

    def test_malformed_shapes_are_rejected(self):
        bad_payloads = [
            [],
            "ok",
            {"success": True, "totals": []},
            {"success": True, "totals": {"Python": "12"}},
            {"success": True, "totals": {"Python": True}},
            {"success": True, "totals": {}, "runningEntry": "SQL"},
            {"success": True, "totals": {}, "runningEntry": {"category": "SQL", "startTime": "2026-03-02T14:00:00Z"}},
            {"success": True, "totals": {}, "runningEntry": {"_id": "x", "category": "SQL", "startTime": "soon"}},
        ]
        for payload in bad_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    TodaySnapshot.from_payload(payload)


class TestControllerState(unittest.TestCase):

    def test_apply_snapshot_replaces_and_clears_error(self):
        state = ControllerState()
        state.record_failure("refresh failed")
        snap = TodaySnapshot.from_payload(today_payload({"Python": 10}))
        state.apply_snapshot(snap, NOW)
        self.assertIs(state.snapshot, snap)
        self.assertIsNone(state.last_error)
        self.assertEqual(state.consecutive_failures, 0)
        self.assertEqual(state.last_refresh_at, NOW)

    def test_apply_idle_snapshot_resets_elapsed(self):
        state = ControllerState(elapsed=42)
        state.apply_snapshot(TodaySnapshot.empty(), NOW)
        self.assertEqual(state.elapsed, 0)

    def test_record_failure_keeps_snapshot(self):
        snap = TodaySnapshot.from_payload(today_payload({"Python": 10}))
        state = ControllerState(snapshot=snap)
        state.record_failure("boom")
        state.record_failure("boom again")
        self.assertIs(state.snapshot, snap)
        self.assertEqual(state.last_error, "boom again")
        self.assertEqual(state.consecutive_failures, 2)

    def test_command_failure_does_not_count_as_fetch_failure(self):
        state = ControllerState()
        state.record_failure("start failed", fetch=False)
        self.assertEqual(state.last_error, "start failed")
        self.assertEqual(state.consecutive_failures, 0)

    def test_running_category(self):
        state = ControllerState()
        self.assertIsNone(state.running_category)
        state.snapshot = TodaySnapshot.from_payload(today_payload(running=running_payload("TT", 5)))
        self.assertEqual(state.running_category, "TT")


if __name__ == "__main__":
    unittest.main()
