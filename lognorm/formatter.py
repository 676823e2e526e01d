"""Output formatters: text, JSON (NDJSON), colorized (ANSI), detail, timeline."""

import json
from typing import Callable, Sequence

from lognorm.detail import format_display_time, looks_like_timestamp, resolve_context_data
from lognorm.models import LogEntry, TimelineBucket, entry_to_dict
from lognorm.timeline import timeline_span

# ANSI color codes
COLORS = {
    "debug": "\033[90m",   # grey
    "info": "\033[34m",    # blue
    "warn": "\033[33m",    # yellow
    "error": "\033[31m",   # red
    "fatal": "\033[1;31m", # bold red
}
RESET = "\033[0m"

# Stacking order for timeline bars, most severe first
_BAR_ORDER = ("fatal", "error", "warn", "info", "debug")
_BAR_CHARS = {"fatal": "#", "error": "#", "warn": "=", "info": "-", "debug": "."}


def format_text(entry: LogEntry) -> str:
    """Return the raw log line."""
    return entry.raw if entry.raw is not None else entry.message


def format_json(entry: LogEntry) -> str:
    """Return NDJSON, one JSON object per line, compatible with jq."""
    return json.dumps(entry_to_dict(entry), ensure_ascii=False)


def format_color(entry: LogEntry) -> str:
    """Return the entry with an ANSI-colored level."""
    color = COLORS.get(entry.level, "")
    return f"[{entry.timestamp}] [{color}{entry.level.upper()}{RESET}] {entry.message}"


def _annotate_timestamps(text: str, context: dict) -> str:
    """Append a readable form after ISO timestamp strings in pretty JSON."""
    lines = text.split("\n")
    stamps = {
        json.dumps(v, ensure_ascii=False): format_display_time(v, millis=False)
        for v in context.values() if looks_like_timestamp(v)
    }
    for i, line in enumerate(lines):
        for encoded, readable in stamps.items():
            if line.rstrip(",").endswith(encoded) and readable != encoded.strip('"'):
                lines[i] = f"{line}  // {readable}"
                break
    return "\n".join(lines)


def format_detail(entry: LogEntry) -> str:
    """Multi-line view: header, message, context data and the raw line."""
    context = resolve_context_data(entry)
    pretty = json.dumps(context, indent=2, ensure_ascii=False)
    lines = [
        f"Log {format_display_time(entry.timestamp)}",
        f"  level:   {entry.level.upper()}",
    ]
    if entry.hostname:
        lines.append(f"  host:    {entry.hostname}")
    if entry.pid is not None:
        lines.append(f"  pid:     {entry.pid}")
    lines.append(f"  message: {entry.message}")
    lines.append("  context:")
    lines.extend(f"    {line}" for line in _annotate_timestamps(pretty, context).split("\n"))
    if entry.raw is not None:
        lines.append(f"  raw:     {entry.raw}")
    return "\n".join(lines)


def get_formatter(output_format: str = "text", color: bool = False) -> Callable[[LogEntry], str]:
    """Factory that returns the right formatter based on args."""
    if output_format == "json":
        return format_json
    if output_format == "detail":
        return format_detail
    if color:
        return format_color
    return format_text


def format_timeline(
    buckets: Sequence[TimelineBucket],
    width: int = 50,
    color: bool = False,
) -> str:
    """Horizontal bar chart, one row per bucket, bars split by level."""
    if not buckets:
        return "No timeline data available"

    max_count = max(b.count for b in buckets) or 1
    rows = []
    for bucket in buckets:
        bar_len = round(bucket.count / max_count * width)
        segments = []
        used = 0
        for level in _BAR_ORDER:
            n = bucket.by_level.get(level, 0)
            if not n:
                continue
            seg_len = round(n / bucket.count * bar_len)
            seg_len = min(seg_len, bar_len - used)
            used += seg_len
            seg = _BAR_CHARS[level] * seg_len
            segments.append(f"{COLORS[level]}{seg}{RESET}" if color and seg else seg)
        stamp = bucket.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        rows.append(f"{stamp}  {''.join(segments)}{' ' * (width - used)} {bucket.count}")

    start, end = timeline_span(buckets)
    rows.append("")
    rows.append(f"{start.strftime('%b %d, %Y')} .. {end.strftime('%b %d, %Y')}  (max {max_count}/bucket)")
    return "\n".join(rows)
