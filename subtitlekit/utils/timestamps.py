"""Conversion between float seconds and SRT / VTT timestamp text."""
import math
import re
from subtitlekit.models.caption import Dialect

BOM = "\ufeff"

_SRT_RE = re.compile(r"(\d+):(\d{1,2}):(\d{1,2})[.,](\d{1,3})")
_VTT_RE = re.compile(r"(?:(\d+):)?(\d{1,2}):(\d{1,2})[.,](\d{1,3})")


def seconds_to_timestamp(seconds: float, dialect: Dialect = Dialect.SRT) -> str:
    """Format seconds as ``HH:MM:SS,mmm`` (SRT) or ``HH:MM:SS.mmm`` (VTT).

    Milliseconds are truncated, not rounded. Hours are never truncated, so
    media longer than 99 hours still round-trips.
    """
    # round() at sub-millisecond precision drops float noise before truncating
    total_ms = max(0, math.floor(round(seconds * 1000, 3)))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    sep = "," if dialect == Dialect.SRT else "."
    return f"{hours:02d}:{minutes:02d}:{secs:02d}{sep}{ms:03d}"


def timestamp_to_seconds(text: str, dialect: Dialect = Dialect.SRT) -> float:
    """Parse a timestamp, returning 0.0 when no timestamp is found."""
    cleaned = (text or "").replace(BOM, "").strip()
    pattern = _SRT_RE if dialect == Dialect.SRT else _VTT_RE
    m = pattern.search(cleaned)
    if not m:
        return 0.0
    hours, minutes, secs, frac = m.groups()
    ms = int(frac.ljust(3, "0")[:3])
    return int(hours or 0) * 3600 + int(minutes) * 60 + int(secs) + ms / 1000
