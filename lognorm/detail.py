"""Helpers for inspecting a single entry in detail views."""

import json
import logging
import re
from typing import Any

from lognorm.models import LogEntry
from lognorm.timestamps import parse_instant

logger = logging.getLogger(__name__)

_ISO_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")

# A JSON object embedded at the start of a message, followed by free text
_EMBEDDED_OBJECT_SEP = "}} "


def _load_object(text: str) -> dict[str, Any] | None:
    try:
        value = json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def resolve_context_data(entry: LogEntry) -> dict[str, Any]:
    """Best available structured view of an entry.

    Tries, in order: the decoded record, a JSON object prefix of the message,
    the raw line as JSON, and finally {"content": message}.
    """
    if entry.data is not None:
        return entry.data

    head, sep, _ = entry.message.partition(_EMBEDDED_OBJECT_SEP)
    if sep:
        embedded = _load_object(head + "}}")
        if embedded is not None:
            return embedded
        logger.debug("Message prefix of entry %s is not a JSON object", entry.id)

    if entry.raw:
        decoded = _load_object(entry.raw)
        if decoded is not None:
            return decoded

    return {"content": entry.message}


def looks_like_timestamp(value: Any) -> bool:
    return isinstance(value, str) and bool(_ISO_PREFIX_RE.match(value))


def format_display_time(timestamp: str, millis: bool = True) -> str:
    """'2026-01-09T20:52:09.651Z' -> 'Jan 9, 2026 at 8:52:09.651PM'.

    Unparseable input is returned unchanged.
    """
    dt = parse_instant(timestamp)
    if dt is None:
        return timestamp
    hour = dt.hour % 12 or 12
    fraction = f".{dt.microsecond // 1000:03d}" if millis else ""
    return (
        f"{dt.strftime('%b')} {dt.day}, {dt.year} at "
        f"{hour}:{dt.minute:02d}:{dt.second:02d}{fraction}{dt.strftime('%p')}"
    )
