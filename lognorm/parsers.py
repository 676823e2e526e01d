"""Line parsers and the dispatcher that turns file content into a ParsedLog.

Dispatch order per line:
  1. Starts with '{'          -> structured JSON record
  2. [timestamp] [LEVEL] rest -> bracketed structured text
  3. Anything else            -> plain text (never fails)
"""

import json
import logging
import re
from collections import Counter
from typing import Any, Callable

from lognorm.levels import classify_level
from lognorm.models import DateRange, IdSequence, LogEntry, ParsedLog
from lognorm.timestamps import (
    coerce_timestamp,
    extract_timestamp,
    normalize_bracket_timestamp,
    now_iso,
    parse_instant,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Field fallback chains (first present wins)
# ---------------------------------------------------------------------------

LEVEL_FIELDS = ("level", "severity", "log_level", "loglevel")
TIMESTAMP_FIELDS = ("dt", "timestamp", "time", "@timestamp", "date", "datetime")
MESSAGE_FIELDS = ("message", "msg", "text", "log", "body")
HOST_FIELDS = ("hostname", "host")
BRACKET_MESSAGE_FIELDS = ("message", "msg")

# ---------------------------------------------------------------------------
# Compiled regex patterns
# ---------------------------------------------------------------------------

_BRACKETED_RE = re.compile(r"^\[([^\]]+)\]\s*\[([^\]]+)\]\s*(.+)$")

_LEADING_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}(?:\.\d+)?\s*")

_LEADING_LEVEL_TAG_RE = re.compile(
    r"^\s*\[(INFO|WARN|WARNING|ERROR|DEBUG|FATAL|CRITICAL)\]\s*", re.IGNORECASE
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _first_present(data: dict[str, Any], fields: tuple[str, ...]) -> Any:
    """Value of the first field that exists and is neither null nor empty."""
    for name in fields:
        value = data.get(name)
        if value is not None and value != "":
            return value
    return None


def _to_text(value: Any) -> str:
    """Strings pass through; everything else gets its compact JSON encoding."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _decode_object(text: str) -> dict[str, Any] | None:
    try:
        data = json.loads(text)
    # Over-long integer literals and deep nesting fail outside JSONDecodeError
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug("Not a JSON object: %s", e)
        return None
    if not isinstance(data, dict):
        return None
    return data


# ---------------------------------------------------------------------------
# Format-specific parsers
# ---------------------------------------------------------------------------


def parse_json_line(line: str, ids: IdSequence) -> LogEntry | None:
    """Decode a line that is a whole JSON record. None if it does not decode."""
    data = _decode_object(line)
    if data is None:
        return None

    level_raw = _first_present(data, LEVEL_FIELDS)
    timestamp = _first_present(data, TIMESTAMP_FIELDS)
    message = _first_present(data, MESSAGE_FIELDS)
    if message is None:
        message = data

    return LogEntry(
        id=ids.next_id(),
        timestamp=coerce_timestamp(timestamp) if timestamp is not None else now_iso(),
        level=classify_level(str(level_raw) if level_raw is not None else "info"),
        message=_to_text(message) or line,
        pid=data.get("pid"),
        hostname=_first_present(data, HOST_FIELDS),
        message_field=data.get("message_field"),
        data=data,
        raw=line,
    )


def parse_bracketed_line(line: str, ids: IdSequence) -> LogEntry | None:
    """Parse '[timestamp] [LEVEL] rest', where rest may itself be a JSON object."""
    m = _BRACKETED_RE.match(line)
    if not m:
        return None

    timestamp_part, level_part, rest = m.groups()
    message = rest
    data = None

    if rest.strip().startswith("{"):
        data = _decode_object(rest)
        if data is not None:
            message = _to_text(_first_present(data, BRACKET_MESSAGE_FIELDS) or rest)

    return LogEntry(
        id=ids.next_id(),
        timestamp=normalize_bracket_timestamp(timestamp_part),
        level=classify_level(level_part),
        message=message.strip() or line,
        data=data,
        raw=line,
    )


def parse_plain_line(line: str, ids: IdSequence) -> LogEntry:
    """Fallback parser: pull out whatever timestamp and level the text offers."""
    found = extract_timestamp(line)

    message = line
    if found:
        message = line.replace(found.text, "", 1).strip()
        message = _LEADING_DATETIME_RE.sub("", message, count=1).strip()
    message = _LEADING_LEVEL_TAG_RE.sub("", message, count=1).strip()

    return LogEntry(
        id=ids.next_id(),
        timestamp=found.value if found else now_iso(),
        level=classify_level(line),
        message=message or line,
        raw=line,
    )


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

LineParser = Callable[[str, IdSequence], LogEntry | None]

# (format name, cheap pre-check, parser) in priority order
LINE_PARSERS: tuple[tuple[str, Callable[[str], bool], LineParser], ...] = (
    ("json", lambda line: line.strip().startswith("{"), parse_json_line),
    ("bracketed", lambda line: True, parse_bracketed_line),
    ("plain", lambda line: True, parse_plain_line),
)


def _dispatch(line: str, ids: IdSequence) -> tuple[str, LogEntry]:
    for name, sniff, parser in LINE_PARSERS:
        if not sniff(line):
            continue
        entry = parser(line, ids)
        if entry is not None:
            return name, entry
    # Unreachable while the plain parser stays last
    raise AssertionError("plain-text parser must always produce an entry")


def parse_line(line: str, ids: IdSequence | None = None) -> LogEntry:
    """Parse a single non-blank line into exactly one entry."""
    return _dispatch(line, ids or IdSequence())[1]


def parse(content: str, ids: IdSequence | None = None) -> ParsedLog:
    """Parse the full text of one log file.

    Blank lines are skipped; every other line yields exactly one entry, in
    input order. A fresh id sequence is used unless one is supplied.
    """
    ids = ids or IdSequence()
    entries: list[LogEntry] = []
    levels: set[str] = set()
    formats: Counter = Counter()
    start = end = None

    for line in content.split("\n"):
        line = line.rstrip("\r")
        if not line.strip():
            continue

        fmt, entry = _dispatch(line, ids)
        formats[fmt] += 1
        entries.append(entry)
        levels.add(entry.level)

        instant = parse_instant(entry.timestamp)
        if instant is not None:
            if start is None or instant < start:
                start = instant
            if end is None or instant > end:
                end = instant

    logger.debug(
        "Parsed %d entries (%s), %d ids issued",
        len(entries),
        ", ".join(f"{k}={v}" for k, v in sorted(formats.items())) or "none",
        ids.issued,
    )

    return ParsedLog(
        entries=entries,
        levels=sorted(levels),
        date_range=DateRange(start, end) if start is not None else None,
    )
