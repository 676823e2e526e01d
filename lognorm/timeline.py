"""Timeline bucketing: entry density over time, split by level.

The bucket count scales with volume (one bucket per ten entries) but is
clamped to [min_buckets, max_buckets]. Widths are computed in milliseconds;
a zero-length range uses a width of 1 ms so everything lands in bucket 0.
Only buckets that receive at least one entry are returned.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Sequence

from lognorm.models import LogEntry, TimelineBucket
from lognorm.timestamps import parse_instant

DEFAULT_MIN_BUCKETS = 20
DEFAULT_MAX_BUCKETS = 100

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _to_millis(dt: datetime) -> float:
    return (dt - _EPOCH) / timedelta(milliseconds=1)


def _from_millis(ms: float) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


def bucket_count(
    entry_count: int,
    min_buckets: int = DEFAULT_MIN_BUCKETS,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
) -> float:
    """entry_count / 10 clamped to [min_buckets, max_buckets]."""
    return min(max_buckets, max(min_buckets, entry_count / 10))


def bucketize(
    entries: Sequence[LogEntry],
    min_buckets: int = DEFAULT_MIN_BUCKETS,
    max_buckets: int = DEFAULT_MAX_BUCKETS,
) -> list[TimelineBucket]:
    """Group entries into time buckets ordered by start time."""
    if not entries:
        return []

    timed = []
    for entry in entries:
        instant = parse_instant(entry.timestamp)
        if instant is not None:
            timed.append((_to_millis(instant), entry.level))
    if not timed:
        return []

    min_ms = min(t for t, _ in timed)
    max_ms = max(t for t, _ in timed)
    # Scales with the full input length, not only the timed entries
    width = (max_ms - min_ms) / bucket_count(len(entries), min_buckets, max_buckets) or 1

    buckets: dict[int, TimelineBucket] = {}
    for ms, level in timed:
        index = math.floor((ms - min_ms) / width)
        bucket = buckets.get(index)
        if bucket is None:
            bucket = buckets[index] = TimelineBucket(timestamp=_from_millis(min_ms + index * width))
        bucket.count += 1
        if level in bucket.by_level:
            bucket.by_level[level] += 1

    return [buckets[i] for i in sorted(buckets)]


def timeline_span(buckets: Sequence[TimelineBucket]) -> tuple[datetime, datetime] | None:
    """Start of the first and last bucket, for axis labels."""
    if not buckets:
        return None
    return buckets[0].timestamp, buckets[-1].timestamp
