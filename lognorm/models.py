"""Normalized log entry model: every input format maps to this schema."""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any

# Severity order, lowest first
LEVELS = ("debug", "info", "warn", "error", "fatal")


@dataclass(frozen=True)
class LogEntry:
    id: int
    timestamp: str       # ISO 8601-like, e.g. 2024-01-01T00:00:00Z
    level: str           # one of LEVELS
    message: str
    pid: Any = None
    hostname: str | None = None
    message_field: str | None = None
    data: dict[str, Any] | None = None
    raw: str | None = None   # original unmodified line


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class ParsedLog:
    entries: list[LogEntry] = field(default_factory=list)
    levels: list[str] = field(default_factory=list)
    date_range: DateRange | None = None


@dataclass
class TimelineBucket:
    timestamp: datetime
    count: int = 0
    by_level: dict[str, int] = field(default_factory=lambda: dict.fromkeys(LEVELS, 0))


class IdSequence:
    """Monotonically increasing entry ids, scoped to whoever owns the instance."""

    def __init__(self, start: int = 0):
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def issued(self) -> int:
        return self._next


def entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a LogEntry to a dict, dropping None values for cleaner JSON."""
    return {k: v for k, v in asdict(entry).items() if v is not None}
