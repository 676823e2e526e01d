"""log-normalize: parse any log file into uniform entries, filter, and chart them."""

import logging
import os
import sys
from argparse import ArgumentParser
from datetime import timezone
from itertools import islice

from lognorm.config import Config
from lognorm.filters import FilterState
from lognorm.formatter import format_timeline, get_formatter
from lognorm.levels import normalize_level_name
from lognorm.parsers import parse
from lognorm.reader import read_content
from lognorm.stats import compute_summary, format_summary_json, format_summary_text
from lognorm.timeline import bucketize
from lognorm.timestamps import parse_instant

logger = logging.getLogger("lognorm")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="log-normalize",
        description="Normalize, filter, and chart a log file of any common format.",
    )
    parser.add_argument(
        "file",
        help="Log file path ('-' for stdin)",
    )
    parser.add_argument(
        "--level",
        action="append",
        default=[],
        help="Keep only these levels (repeatable or comma-separated, e.g. warn,error)",
    )
    parser.add_argument(
        "--search",
        default="",
        help="Keep entries whose message or data contains TEXT (case-insensitive)",
    )
    parser.add_argument(
        "--since",
        help="Keep entries at or after this ISO timestamp",
    )
    parser.add_argument(
        "--until",
        help="Keep entries at or before this ISO timestamp",
    )
    parser.add_argument(
        "--lines",
        type=int,
        help="Limit output to N entries",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json", "detail"],
        help="Output format (default: text, or output.format from config)",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        help="Colorize output by log level (ANSI)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--timeline",
        action="store_true",
        help="Show a time-bucketed density chart instead of entries",
    )
    mode.add_argument(
        "--summary",
        action="store_true",
        help="Show level counts and date range instead of entries",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config file (default: $LOGNORM_CONFIG)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def _parse_bound(value, flag):
    if value is None:
        return None
    instant = parse_instant(value)
    if instant is None:
        raise ValueError(f"{flag} expects an ISO timestamp, got {value!r}")
    return instant.astimezone(timezone.utc)


def build_filter_state(args) -> FilterState:
    """Translate CLI flags into a FilterState snapshot."""
    levels = set()
    for item in args.level:
        for name in item.split(","):
            if name.strip():
                levels.add(normalize_level_name(name))

    return FilterState(
        search=args.search,
        levels=frozenset(levels),
        start=_parse_bound(args.since, "--since"),
        end=_parse_bound(args.until, "--until"),
    )


def run_pipeline(args, config: Config):
    """Read, parse, filter, then render one view."""
    state = build_filter_state(args)
    content = read_content(args.file, encoding=config["reader"]["encoding"])

    parsed = parse(content)
    entries = state.apply(parsed.entries)
    logger.info("%d of %d entries pass the filter", len(entries), len(parsed.entries))

    output = args.output or config["output"]["format"]
    color = args.color or bool(config["output"]["color"])

    if args.summary:
        summary = compute_summary(parsed, entries)
        if output == "json":
            print(format_summary_json(summary))
        else:
            print(format_summary_text(summary))
        return

    if args.timeline:
        low, high = config.timeline_bounds()
        buckets = bucketize(entries, min_buckets=low, max_buckets=high)
        print(format_timeline(buckets, width=int(config["timeline"]["width"]), color=color))
        return

    formatter = get_formatter(output_format=output, color=color)
    shown = islice(entries, args.lines) if args.lines else entries
    for entry in shown:
        print(formatter(entry))


def main():
    parser = build_parser()
    args = parser.parse_args()
    config = Config(args.config)

    level = "DEBUG" if args.verbose else str(config["logging"]["level"]).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [LOGNORM] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        run_pipeline(args, config)
    except (FileNotFoundError, IsADirectoryError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        # Reader went away (e.g. `| head`); silence the flush at interpreter exit
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        sys.exit(0)


if __name__ == "__main__":
    main()
