"""
Reading and writing the per-media ASS marker file.

The ASS file doubles as persistent storage: each marker is written as a
``Comment:`` event so players that load the file as subtitles show nothing,
while the start timestamp and the ``<prefix> <id>`` label carry everything
needed to rebuild the store.

Parsing is tolerant. Lines that look like marker records but cannot be
decoded are skipped and reported in ParseResult.skipped rather than raised.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .config import MarkerOptions
from .constants import ASS_HEADER
from .errors import MarkerIOError
from .marker_store import Marker, MarkerStore
from .timecode import encode_storage, try_decode_storage

logger = logging.getLogger(__name__)

EVENT_LINE_FORMAT = "Comment: 0,{start},{end},Default,,0,0,0,,{text}"

# Any ASS event line: "Comment:", "Dialogue:", ...
_EVENT_LINE_RE = re.compile(r"^\s*(Comment|Dialogue|Picture|Sound|Movie|Command):")
# "Comment: 0,0:00:12.34,..." -> "0:00:12.34"
_START_FIELD_RE = re.compile(r"^Comment:\s*\d+,\s*([^,]+),")
# Text after the last ",," delimiter run, surrounding whitespace trimmed
_TEXT_FIELD_RE = re.compile(r",,\s*((?:(?!,,).)*?)\s*$")


@dataclass
class SkippedLine:
    """A candidate marker line that could not be decoded."""

    line_number: int
    text: str
    reason: str


@dataclass
class ParseResult:
    """
    Outcome of parsing an ASS marker document.

    Attributes:
        markers: Decoded markers ordered by id
        skipped: Candidate lines that were ignored, with the reason
        next_id: One more than the highest id seen, or 1
    """

    markers: List[Marker] = field(default_factory=list)
    skipped: List[SkippedLine] = field(default_factory=list)
    next_id: int = 1


def serialize(store: MarkerStore, options: Optional[MarkerOptions] = None) -> str:
    """
    Render the store as an ASS document, one Comment event per marker in id order.

    Args:
        store: Markers to write
        options: Supplies the label prefix and the record duration

    Returns:
        The document text, ending with a newline
    """
    options = options or MarkerOptions()
    lines = list(ASS_HEADER)
    for marker in store.by_id_ascending():
        lines.append(
            EVENT_LINE_FORMAT.format(
                start=encode_storage(marker.time),
                end=encode_storage(marker.time + options.marker_display_duration),
                text=marker.label(options.marker_prefix),
            )
        )
    return "\n".join(lines) + "\n"


def parse(document: str, options: Optional[MarkerOptions] = None) -> ParseResult:
    """
    Extract markers from an ASS document.

    Only event lines (``Comment:``, ``Dialogue:``, ...) containing the marker
    prefix are considered. For those, the start timestamp and the id
    following the prefix in the text field must both decode, otherwise the line is recorded as skipped.

    Args:
        document: ASS file contents
        options: Supplies the marker prefix

    Returns:
        ParseResult with markers ordered by id
    """
    options = options or MarkerOptions()
    prefix = options.marker_prefix
    id_re = re.compile(re.escape(prefix) + r"\s*(\d+)")
    result = ParseResult()

    for line_number, line in enumerate(document.splitlines(), start=1):
        if prefix not in line:
            continue
        # Header lines such as "Title: MPV Markers" are not records
        if not _EVENT_LINE_RE.match(line):
            continue

        start_match = _START_FIELD_RE.search(line)
        text_match = _TEXT_FIELD_RE.search(line)
        if not start_match or not text_match:
            result.skipped.append(SkippedLine(line_number, line, "not a marker event"))
            continue

        time = try_decode_storage(start_match.group(1))
        if time is None:
            result.skipped.append(SkippedLine(line_number, line, "bad start timestamp"))
            continue

        id_match = id_re.search(text_match.group(1))
        if not id_match:
            result.skipped.append(SkippedLine(line_number, line, "no marker id"))
            continue

        marker_id = int(id_match.group(1))
        if marker_id <= 0:
            result.skipped.append(SkippedLine(line_number, line, "marker id must be positive"))
            continue

        result.markers.append(Marker(time=time, id=marker_id))

    result.markers.sort(key=lambda m: m.id)
    result.next_id = max((m.id for m in result.markers), default=0) + 1

    for skipped in result.skipped:
        logger.info(f"Skipped line {skipped.line_number} ({skipped.reason}): {skipped.text!r}")

    return result


def load_markers(
    path: Union[str, Path],
    store: MarkerStore,
    options: Optional[MarkerOptions] = None,
) -> ParseResult:
    """
    Replace the store's contents with the markers saved in ``path``.

    A missing or unreadable file leaves the store empty; it is never an error.

    Args:
        path: Backing ASS file
        store: Store to fill
        options: Supplies the marker prefix

    Returns:
        The ParseResult used to fill the store
    """
    path = Path(path)
    try:
        document = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.debug(f"No marker file at {path}")
        document = ""
    except OSError as e:
        logger.error(f"Could not read marker file {path}: {e}")
        document = ""

    result = parse(document, options)
    store.load_replace(result.markers)
    if document:
        logger.info(f"Loaded {len(result.markers)} previous marker(s) from {path}")
    return result


def delete_markers_file(path: Union[str, Path]) -> bool:
    """
    Delete the backing file.

    Returns:
        True if a file was deleted, False if there was none

    Raises:
        MarkerIOError: If the file exists but cannot be removed
    """
    path = Path(path)
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error(f"Could not delete marker file {path}: {e}")
        raise MarkerIOError("delete", path, e.strerror or str(e)) from e
    logger.info(f"Deleted marker file {path}")
    return True


def save_markers(
    path: Union[str, Path],
    store: MarkerStore,
    options: Optional[MarkerOptions] = None,
) -> int:
    """
    Write the whole store to ``path``, or delete the file when the store is empty.

    Args:
        path: Backing ASS file
        store: Markers to write
        options: Supplies the label prefix and record duration

    Returns:
        Number of markers written

    Raises:
        MarkerIOError: If the file cannot be written or deleted
    """
    path = Path(path)
    if not store:
        delete_markers_file(path)
        return 0

    document = serialize(store, options)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(document)
    except OSError as e:
        logger.error(f"Could not open file for writing: {path}: {e}")
        raise MarkerIOError("write", path, e.strerror or str(e)) from e

    logger.info(f"Markers updated ({len(store)} total) in {path}")
    return len(store)
