"""Level classifier: maps arbitrary text onto the five canonical levels.

Checks run in a fixed priority order and the first hit wins, regardless of
where the keyword sits in the text:

  1. fatal / critical  -> fatal
  2. error / err]      -> error
  3. warn / warning    -> warn
  4. debug / dbg       -> debug
  5. info, or nothing  -> info
"""

from lognorm.models import LEVELS

_RULES = (
    ("fatal", ("fatal", "critical")),
    ("error", ("error", "err]")),
    ("warn", ("warn", "warning")),
    ("debug", ("debug", "dbg")),
    ("info", ("info",)),
)

# Names accepted from the command line / config for level selection
_ALIASES = {
    "trace": "debug",
    "dbg": "debug",
    "information": "info",
    "notice": "info",
    "warning": "warn",
    "err": "error",
    "critical": "fatal",
    "crit": "fatal",
    "emergency": "fatal",
    "alert": "fatal",
}


def classify_level(text: str) -> str:
    """Classify free text into a level (case-insensitive substring match)."""
    lowered = text.lower()
    for level, keywords in _RULES:
        if any(k in lowered for k in keywords):
            return level
    return "info"


def normalize_level_name(name: str) -> str:
    """Resolve a user-supplied level name to a canonical level.

    Raises ValueError for names that are neither a level nor a known alias.
    """
    key = name.strip().lower()
    if key in LEVELS:
        return key
    if key in _ALIASES:
        return _ALIASES[key]
    raise ValueError(
        f"Unknown log level: {name!r} (expected one of {', '.join(LEVELS)})"
    )
