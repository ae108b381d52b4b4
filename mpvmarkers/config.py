"""
Options for the marker script.

Options can be read from an mpv-style ``script-opts/auto_markers.conf``
file made of ``key=value`` lines. Command-line flags are applied on top.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .constants import (
    DEFAULT_MARKER_DISPLAY_DURATION,
    DEFAULT_MARKER_PREFIX,
    DEFAULT_OSD_DURATION,
    OPTIONS_FILE_NAME,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerOptions:
    """
    Recognized options.

    Attributes:
        marker_display_duration: Seconds between start and end of each ASS record
        osd_duration: Seconds on-screen messages stay visible
        marker_prefix: Label prefix; also how marker lines are recognized on load
    """

    marker_display_duration: float = DEFAULT_MARKER_DISPLAY_DURATION
    osd_duration: float = DEFAULT_OSD_DURATION
    marker_prefix: str = DEFAULT_MARKER_PREFIX

    def with_overrides(self, **overrides: Any) -> "MarkerOptions":
        """Return a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "marker_prefix" in changes and not str(changes["marker_prefix"]).strip():
            raise ValueError("marker_prefix must not be empty")
        return replace(self, **changes)


def default_options_path() -> Path:
    """Location mpv uses for script options, honoring MPV_HOME."""
    mpv_home = os.environ.get("MPV_HOME")
    if mpv_home:
        base = Path(mpv_home)
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "mpv"
    return base / "script-opts" / OPTIONS_FILE_NAME


def _convert(raw: str, default: Any) -> Any:
    if isinstance(default, float):
        return float(raw)
    return raw


def parse_options(text: str, base: Optional[MarkerOptions] = None) -> MarkerOptions:
    """
    Parse ``key=value`` option lines.

    Args:
        text: Contents of an options file
        base: Options to start from (defaults to MarkerOptions())

    Returns:
        The resulting options. Unknown keys and bad values are logged and ignored.
    """
    options = base or MarkerOptions()
    defaults = {f.name: getattr(options, f.name) for f in fields(MarkerOptions)}
    values: Dict[str, Any] = {}

    for line_number, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, raw = line.partition("=")
        key = key.strip()
        if not sep:
            logger.warning(f"Ignoring option line {line_number} without '=': {line!r}")
            continue
        if key not in defaults:
            logger.warning(f"Ignoring unknown option '{key}' on line {line_number}")
            continue
        try:
            values[key] = _convert(raw.strip(), defaults[key])
        except ValueError:
            logger.warning(f"Invalid value for option '{key}': {raw.strip()!r}, keeping {defaults[key]!r}")

    if "marker_prefix" in values and not values["marker_prefix"]:
        logger.warning("Empty marker_prefix ignored")
        del values["marker_prefix"]

    return replace(options, **values)


def load_options(path: Optional[Union[str, Path]] = None) -> MarkerOptions:
    """
    Load options from a file, returning defaults if it does not exist.

    Args:
        path: Options file (default: mpv's script-opts/auto_markers.conf)
    """
    options_path = Path(path) if path else default_options_path()
    try:
        text = options_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"No options file at {options_path}, using defaults")
        return MarkerOptions()
    except OSError as e:
        logger.warning(f"Could not read options file {options_path}: {e}")
        return MarkerOptions()

    logger.info(f"Loaded options from {options_path}")
    return parse_options(text)
