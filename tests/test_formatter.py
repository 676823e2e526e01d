"""Tests for lognorm/formatter.py"""

import json
import unittest
from datetime import datetime, timezone

from lognorm.formatter import (
    COLORS,
    RESET,
    format_color,
    format_detail,
    format_json,
    format_text,
    format_timeline,
    get_formatter,
)
from lognorm.models import LogEntry, TimelineBucket


def _entry(level="info", message="Server started", data=None) -> LogEntry:
    return LogEntry(
        id=3,
        timestamp="2026-01-09T20:52:09.651Z",
        level=level,
        message=message,
        hostname="web-1",
        pid=42,
        data=data,
        raw=f"[2026-01-09 20:52:09] [{level.upper()}] {message}",
    )


class TestFormatText(unittest.TestCase):
    def test_returns_raw_line(self):
        entry = _entry()
        self.assertEqual(format_text(entry), entry.raw)


class TestFormatJson(unittest.TestCase):
    def test_valid_json(self):
        parsed = json.loads(format_json(_entry()))
        self.assertEqual(parsed["id"], 3)
        self.assertEqual(parsed["level"], "info")
        self.assertEqual(parsed["message"], "Server started")
        self.assertEqual(parsed["timestamp"], "2026-01-09T20:52:09.651Z")

    def test_unset_fields_dropped(self):
        parsed = json.loads(format_json(_entry()))
        self.assertNotIn("data", parsed)
        self.assertNotIn("message_field", parsed)


class TestFormatColor(unittest.TestCase):
    def test_info_color(self):
        result = format_color(_entry(level="info"))
        self.assertIn(COLORS["info"], result)
        self.assertIn(RESET, result)

    def test_error_color(self):
        result = format_color(_entry(level="error"))
        self.assertIn(COLORS["error"] + "ERROR", result)


class TestFormatDetail(unittest.TestCase):
    def test_includes_header_and_context(self):
        text = format_detail(_entry(data={"at": "2026-01-09T20:52:09Z", "n": 1}))
        self.assertIn("Log Jan 9, 2026 at 8:52:09.651PM", text)
        self.assertIn("host:    web-1", text)
        self.assertIn('"n": 1', text)
        self.assertIn("// Jan 9, 2026 at 8:52:09PM", text)

    def test_plain_entry_context(self):
        text = format_detail(_entry(message="just text"))
        self.assertIn('"content": "just text"', text)


class TestGetFormatter(unittest.TestCase):
    def test_default_text(self):
        self.assertIs(get_formatter(), format_text)

    def test_json(self):
        self.assertIs(get_formatter("json"), format_json)

    def test_json_ignores_color(self):
        self.assertIs(get_formatter("json", color=True), format_json)

    def test_detail(self):
        self.assertIs(get_formatter("detail"), format_detail)

    def test_color(self):
        self.assertIs(get_formatter("text", color=True), format_color)


class TestFormatTimeline(unittest.TestCase):
    def _bucket(self, minute, **levels):
        bucket = TimelineBucket(timestamp=datetime(2026, 1, 9, 20, minute, tzinfo=timezone.utc))
        for level, n in levels.items():
            bucket.by_level[level] = n
            bucket.count += n
        return bucket

    def test_empty(self):
        self.assertEqual(format_timeline([]), "No timeline data available")

    def test_one_row_per_bucket(self):
        buckets = [self._bucket(0, info=4), self._bucket(5, error=2, info=2)]
        rows = format_timeline(buckets, width=10).split("\n")
        self.assertTrue(rows[0].startswith("2026-01-09 20:00:00"))
        self.assertTrue(rows[1].startswith("2026-01-09 20:05:00"))
        self.assertTrue(rows[0].endswith(" 4"))
        self.assertIn("-" * 10, rows[0])
        self.assertIn("#####-----", rows[1])
        self.assertIn("(max 4/bucket)", rows[-1])

    def test_color_segments(self):
        text = format_timeline([self._bucket(0, warn=1)], width=4, color=True)
        self.assertIn(COLORS["warn"] + "====" + RESET, text)
