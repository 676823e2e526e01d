"""Tests for lognorm/timeline.py"""

import unittest
from datetime import timedelta

from lognorm.models import LEVELS, LogEntry
from lognorm.parsers import parse
from lognorm.timeline import bucket_count, bucketize, timeline_span
from lognorm.timestamps import parse_instant


def _entry(ts="2024-01-01T00:00:00Z", level="info", id=0) -> LogEntry:
    return LogEntry(id=id, timestamp=ts, level=level, message="m")


class TestBucketCount(unittest.TestCase):
    def test_lower_clamp(self):
        self.assertEqual(bucket_count(5), 20)

    def test_scales_with_volume(self):
        self.assertEqual(bucket_count(500), 50)

    def test_upper_clamp(self):
        self.assertEqual(bucket_count(5000), 100)

    def test_custom_bounds(self):
        self.assertEqual(bucket_count(5, min_buckets=2, max_buckets=4), 2)


class TestBucketize(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(bucketize([]), [])

    def test_no_valid_timestamps(self):
        self.assertEqual(bucketize([_entry(ts="later"), _entry(ts="never")]), [])

    def test_off_calendar_timestamps_skipped(self):
        entries = [
            _entry(ts="9999-12-31T23:00:00-05:00", id=0),
            _entry(ts="0001-01-01T00:00:00+05:00", id=1),
            _entry(id=2),
        ]
        buckets = bucketize(entries)
        self.assertEqual(len(buckets), 1)
        self.assertEqual(buckets[0].count, 1)

    def test_zero_range_single_bucket(self):
        entries = [_entry(id=i) for i in range(5)]
        buckets = bucketize(entries)
        self.assertEqual(len(buckets), 1)
        self.assertEqual(buckets[0].count, 5)
        self.assertEqual(buckets[0].timestamp, parse_instant("2024-01-01T00:00:00Z"))

    def test_counts_sum_to_timed_entries(self):
        entries = [
            _entry("2024-01-01T00:00:00Z", "info"),
            _entry("2024-01-01T00:00:07Z", "error"),
            _entry("not a date", "warn"),
            _entry("2024-01-01T00:01:00Z", "warn"),
            _entry("2024-01-01T00:00:30Z", "debug"),
        ]
        buckets = bucketize(entries)
        self.assertEqual(sum(b.count for b in buckets), 4)

    def test_all_level_keys_present(self):
        buckets = bucketize([_entry(level="error")])
        self.assertEqual(set(buckets[0].by_level), set(LEVELS))
        self.assertEqual(buckets[0].by_level["error"], 1)
        self.assertEqual(buckets[0].by_level["info"], 0)

    def test_bucket_width_and_placement(self):
        # 2 entries -> 20 buckets over 20s -> 1s wide
        entries = [_entry("2024-01-01T00:00:00Z"), _entry("2024-01-01T00:00:20Z")]
        buckets = bucketize(entries)
        self.assertEqual(len(buckets), 2)
        start = parse_instant("2024-01-01T00:00:00Z")
        self.assertEqual(buckets[0].timestamp, start)
        self.assertEqual(buckets[1].timestamp, start + timedelta(seconds=20))

    def test_sparse_and_sorted(self):
        entries = [
            _entry("2024-01-01T00:00:20Z", "error"),
            _entry("2024-01-01T00:00:00Z", "info"),
            _entry("2024-01-01T00:00:00.400Z", "warn"),
            _entry("2024-01-01T00:00:10Z", "debug"),
        ]
        buckets = bucketize(entries)
        self.assertEqual([b.count for b in buckets], [2, 1, 1])
        stamps = [b.timestamp for b in buckets]
        self.assertEqual(stamps, sorted(stamps))
        self.assertEqual(buckets[0].by_level["info"], 1)
        self.assertEqual(buckets[0].by_level["warn"], 1)

    def test_custom_bounds(self):
        entries = [_entry("2024-01-01T00:00:00Z"), _entry("2024-01-01T00:00:20Z")]
        buckets = bucketize(entries, min_buckets=2, max_buckets=2)
        # width 10s: indices 0 and 2
        self.assertEqual(buckets[1].timestamp, parse_instant("2024-01-01T00:00:20Z"))

    def test_mixed_zones_share_one_axis(self):
        entries = [_entry("2024-01-01T01:00:00+01:00"), _entry("2024-01-01T00:00:00Z")]
        self.assertEqual(len(bucketize(entries)), 1)

    def test_from_parsed_content(self):
        content = "\n".join(f"2024-01-01 00:00:{s:02d} INFO tick" for s in range(0, 60, 3))
        parsed = parse(content)
        buckets = bucketize(parsed.entries)
        self.assertEqual(sum(b.count for b in buckets), len(parsed.entries))


class TestTimelineSpan(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(timeline_span([]))

    def test_first_and_last(self):
        buckets = bucketize([_entry("2024-01-01T00:00:00Z"), _entry("2024-01-01T00:00:20Z")])
        start, end = timeline_span(buckets)
        self.assertLess(start, end)
