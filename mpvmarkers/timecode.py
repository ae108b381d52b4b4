"""
Conversions between seconds and the two timestamp formats used for markers.

- Storage format ``H:MM:SS.CC`` (centiseconds), as written to ASS files.
- Display format ``MM:SS.mmm`` or ``H:MM:SS.mmm`` (milliseconds), as shown
  on screen and in text exports.

All components are truncated, never rounded.
"""

import math
import re
from typing import Optional, Tuple

STORAGE_TIME_FORMAT = "{:d}:{:02d}:{:02d}.{:02d}"
DISPLAY_TIME_FORMAT = "{:02d}:{:02d}.{:03d}"
DISPLAY_TIME_FORMAT_HOURS = "{:d}:{:02d}:{:02d}.{:03d}"

_STORAGE_TIME_RE = re.compile(r"(\d+):(\d\d):(\d\d)\.(\d\d)")
_FLOAT_TOLERANCE = 1e-6


def _split_seconds(seconds: float, scale: int) -> Tuple[int, int, int, int]:
    """
    Split seconds into whole hours, minutes, seconds and a truncated fraction.

    Args:
        seconds: Non-negative time in seconds
        scale: 100 for centiseconds, 1000 for milliseconds

    Returns:
        Tuple of (hours, minutes, seconds, fraction)
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"Time must be a finite, non-negative number of seconds, got {seconds!r}")

    # Tolerance absorbs binary float error, e.g. 12.34 * 100 == 1233.9999...
    ticks = math.floor(seconds * scale + _FLOAT_TOLERANCE)
    whole, fraction = divmod(ticks, scale)

    hours = whole // 3600
    minutes = (whole % 3600) // 60
    secs = whole % 60
    return int(hours), int(minutes), int(secs), int(fraction)


def encode_storage(seconds: float) -> str:
    """
    Format seconds as an ASS timestamp.

    Args:
        seconds: Non-negative time in seconds

    Returns:
        Timestamp string like ``0:00:12.34``
    """
    return STORAGE_TIME_FORMAT.format(*_split_seconds(seconds, 100))


def encode_display(seconds: float) -> str:
    """Format seconds for on-screen display, omitting the hour when it is zero."""
    hours, minutes, secs, millis = _split_seconds(seconds, 1000)
    if hours > 0:
        return DISPLAY_TIME_FORMAT_HOURS.format(hours, minutes, secs, millis)
    return DISPLAY_TIME_FORMAT.format(minutes, secs, millis)


def try_decode_storage(text: str) -> Optional[float]:
    """
    Parse an ASS timestamp back into seconds.

    Args:
        text: Text containing a ``H:MM:SS.CC`` timestamp

    Returns:
        Time in seconds, or None if the text holds no such timestamp
    """
    if not text:
        return None
    match = _STORAGE_TIME_RE.search(text)
    if not match:
        return None
    hours, minutes, secs, centis = (int(group) for group in match.groups())
    return hours * 3600 + minutes * 60 + secs + centis / 100


def decode_storage(text: str) -> float:
    """Parse an ASS timestamp, falling back to 0.0 when it does not match."""
    value = try_decode_storage(text)
    return 0.0 if value is None else value
