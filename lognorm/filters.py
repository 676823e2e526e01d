"""Filter predicates for log entries: level membership, search text and date bounds."""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable

from lognorm.models import LogEntry
from lognorm.timestamps import parse_instant


def _matches_search(entry: LogEntry, needle: str) -> bool:
    """needle must already be lower-cased."""
    if needle in entry.message.lower():
        return True
    if entry.data is not None:
        encoded = json.dumps(entry.data, separators=(",", ":"), ensure_ascii=False)
        return needle in encoded.lower()
    return False


def filter_entries(
    entries: Iterable[LogEntry],
    search: str = "",
    levels: Iterable[str] = (),
) -> list[LogEntry]:
    """Keep entries whose level is selected and whose text contains search.

    An empty level selection or an empty search string disables that check,
    so filter_entries(entries, "", ()) returns every entry in order.
    """
    selected = frozenset(levels)
    needle = search.lower()
    return [
        e for e in entries
        if (not selected or e.level in selected)
        and (not needle or _matches_search(e, needle))
    ]


def filter_by_date_range(
    entries: Iterable[LogEntry],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[LogEntry]:
    """Keep entries whose timestamp falls within [start, end] (inclusive).

    Either bound may be None. Entries without a parseable timestamp are
    dropped only when at least one bound is set.
    """
    if start is None and end is None:
        return list(entries)

    kept = []
    for entry in entries:
        instant = parse_instant(entry.timestamp)
        if instant is None:
            continue
        if start is not None and instant < start:
            continue
        if end is not None and instant > end:
            continue
        kept.append(entry)
    return kept


@dataclass(frozen=True)
class FilterState:
    """Snapshot of the viewer's search box, level toggles and date bounds."""

    search: str = ""
    levels: frozenset[str] = field(default_factory=frozenset)
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self):
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("Date range start must not be after its end")

    @property
    def is_empty(self) -> bool:
        return not self.search and not self.levels and self.start is None and self.end is None

    def with_level_toggled(self, level: str) -> "FilterState":
        return replace(self, levels=self.levels ^ {level})

    def cleared(self) -> "FilterState":
        return FilterState()

    def apply(self, entries: Iterable[LogEntry]) -> list[LogEntry]:
        kept = filter_entries(entries, self.search, self.levels)
        return filter_by_date_range(kept, self.start, self.end)
