"""Statistics: level counts, observed levels and date range."""

import json
from dataclasses import dataclass, field
from typing import Sequence

from lognorm.models import LEVELS, LogEntry, ParsedLog


@dataclass
class LogSummary:
    total_entries: int = 0
    shown_entries: int = 0
    level_counts: dict[str, int] = field(default_factory=lambda: dict.fromkeys(LEVELS, 0))
    levels: list[str] = field(default_factory=list)
    first_timestamp: str | None = None
    last_timestamp: str | None = None


def compute_summary(parsed: ParsedLog, shown: Sequence[LogEntry] | None = None) -> LogSummary:
    """Summarize a parse; shown is the filtered subset (defaults to everything)."""
    shown = parsed.entries if shown is None else shown
    summary = LogSummary(
        total_entries=len(parsed.entries),
        shown_entries=len(shown),
        levels=list(parsed.levels),
    )
    for entry in shown:
        summary.level_counts[entry.level] = summary.level_counts.get(entry.level, 0) + 1

    if parsed.date_range is not None:
        summary.first_timestamp = parsed.date_range.start.isoformat()
        summary.last_timestamp = parsed.date_range.end.isoformat()
    return summary


def format_summary_text(summary: LogSummary) -> str:
    """Human-readable summary."""
    lines = []
    lines.append(f"Total entries: {summary.total_entries}")
    lines.append(f"Shown entries: {summary.shown_entries}")
    lines.append("")

    lines.append("Level counts:")
    for level, count in summary.level_counts.items():
        lines.append(f"  {level.upper():8s} {count}")
    lines.append("")

    lines.append(f"Levels seen: {', '.join(summary.levels) if summary.levels else 'none'}")
    if summary.first_timestamp:
        lines.append(f"Date range: {summary.first_timestamp} .. {summary.last_timestamp}")
    else:
        lines.append("Date range: none")

    return "\n".join(lines)


def format_summary_json(summary: LogSummary) -> str:
    """JSON summary output."""
    return json.dumps({
        "total_entries": summary.total_entries,
        "shown_entries": summary.shown_entries,
        "level_counts": summary.level_counts,
        "levels": summary.levels,
        "date_range": (
            {"start": summary.first_timestamp, "end": summary.last_timestamp}
            if summary.first_timestamp else None
        ),
    }, indent=2)
