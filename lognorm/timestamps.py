"""Timestamp extraction and instant parsing.

Extraction tries three conventions in order, first match wins:
  1. ISO 8601      2026-01-09T20:52:09.651Z, 2026-01-09T20:52:09+02:00
  2. Common log    2026-01-09 20:52:09.651  -> 2026-01-09T20:52:09.651Z
  3. Access log    09/Jan/2026:20:52:09     -> 2026-01-09T20:52:09Z
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_ISO_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?"
)

_COMMON_RE = re.compile(r"\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}(?:\.\d+)?")

_ACCESS_RE = re.compile(
    r"(?P<day>\d{2})/(?P<month>[A-Za-z]{3})/(?P<year>\d{4})"
    r":(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
)

# Anything the pipeline itself emits, plus space-separated variants
_INSTANT_RE = re.compile(
    r"^\s*(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T\s]+(?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?)?"
    r"\s*(?P<zone>Z|z|[+-]\d{2}(?::?\d{2})?)?\s*$"
)

_MONTHS = {
    "jan": "01", "feb": "02", "mar": "03", "apr": "04", "may": "05", "jun": "06",
    "jul": "07", "aug": "08", "sep": "09", "oct": "10", "nov": "11", "dec": "12",
}

# Epoch values above this are treated as milliseconds
_EPOCH_MS_THRESHOLD = 100_000_000_000


class ExtractedTimestamp(NamedTuple):
    text: str    # substring as it appeared in the line
    value: str   # normalized ISO form


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_timestamp(line: str) -> ExtractedTimestamp | None:
    """Find the first recognizable timestamp in an unstructured line."""
    m = _ISO_RE.search(line)
    if m:
        return ExtractedTimestamp(m.group(0), m.group(0))

    m = _COMMON_RE.search(line)
    if m:
        text = m.group(0)
        return ExtractedTimestamp(text, re.sub(r"\s+", "T", text, count=1) + "Z")

    m = _ACCESS_RE.search(line)
    if m:
        month = _MONTHS.get(m.group("month").lower())
        if month:
            value = (
                f"{m.group('year')}-{month}-{m.group('day')}"
                f"T{m.group('hour')}:{m.group('minute')}:{m.group('second')}Z"
            )
            return ExtractedTimestamp(m.group(0), value)

    return None


def normalize_bracket_timestamp(tag: str) -> str:
    """'2024-01-01 10:00:00' -> '2024-01-01T10:00:00Z'; T-separated tags pass through."""
    if "T" in tag:
        return tag
    return re.sub(r"\s+", "T", tag, count=1) + "Z"


# ---------------------------------------------------------------------------
# Instants
# ---------------------------------------------------------------------------


def _epoch_to_datetime(value: float) -> datetime | None:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        seconds = value / 1000 if abs(value) >= _EPOCH_MS_THRESHOLD else value
        return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)
    except (OverflowError, ValueError):
        return None


def _parse_zone(zone: str | None) -> timezone:
    if not zone or zone in ("Z", "z"):
        return timezone.utc
    sign = -1 if zone[0] == "-" else 1
    digits = zone[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4] or 0)
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_instant(value: Any) -> datetime | None:
    """Parse a timestamp into an aware datetime, or None if it is not one.

    Zone-less values are read as UTC so that every instant is comparable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _epoch_to_datetime(value)
    if not isinstance(value, str):
        return None

    m = _INSTANT_RE.match(value)
    if not m:
        return None

    fraction = (m.group("fraction") or "")[:6].ljust(6, "0")
    try:
        dt = datetime(
            int(m.group("year")),
            int(m.group("month")),
            int(m.group("day")),
            int(m.group("hour") or 0),
            int(m.group("minute") or 0),
            int(m.group("second") or 0),
            int(fraction),
            tzinfo=_parse_zone(m.group("zone")),
        )
        # Offsets next to year 1 or 9999 can push the UTC instant off the calendar
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def to_iso(dt: datetime) -> str:
    """UTC ISO string with millisecond precision and a trailing Z."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def now_iso() -> str:
    return to_iso(datetime.now(timezone.utc))


def coerce_timestamp(value: Any) -> str:
    """Render a structured-record timestamp field as the entry's string form."""
    if isinstance(value, str):
        return value
    dt = parse_instant(value)
    if dt is not None:
        return to_iso(dt)
    return str(value)
