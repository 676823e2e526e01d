"""Whole-file reading: the pipeline only ever sees complete text content."""

import logging
import os
import sys

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def read_content(path: str, encoding: str = "utf-8") -> str:
    """Return the full text of one log file ('-' reads stdin).

    Undecodable bytes are replaced rather than aborting the read.
    Raises FileNotFoundError / IsADirectoryError for bad paths.
    """
    if path == STDIN_PATH:
        return sys.stdin.read()

    if os.path.isdir(path):
        raise IsADirectoryError(f"Not a file: {path}")
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        content = f.read()
    logger.info("Read %d characters from %s", len(content), path)
    return content
