import logging
from pathlib import Path
from typing import Optional, Union

from .config import MarkerOptions
from .errors import MarkerIOError, NoMarkersError
from .marker_store import MarkerStore
from .timecode import encode_display

logger = logging.getLogger(__name__)


def render_listing(
    store: MarkerStore,
    media_name: str,
    options: Optional[MarkerOptions] = None,
) -> str:
    """
    Render markers as a tab-separated listing in id order.

    Args:
        store: Markers to list
        media_name: File name shown in the header
        options: Supplies the label prefix

    Returns:
        Listing text: two comment lines, a blank line, then one line per marker

    Raises:
        NoMarkersError: If the store is empty
    """
    if not store:
        raise NoMarkersError()

    options = options or MarkerOptions()
    lines = [
        f"# Markers for {media_name}",
        "# Created by mpvmarkers",
        "",
    ]
    for marker in store.by_id_ascending():
        lines.append(
            f"{marker.id:02d}\t{encode_display(marker.time)}\t{marker.label(options.marker_prefix)}"
        )
    return "\n".join(lines) + "\n"


def export_markers(
    path: Union[str, Path],
    store: MarkerStore,
    media_name: str,
    options: Optional[MarkerOptions] = None,
) -> Path:
    """
    Write the listing to ``path``.

    Raises:
        NoMarkersError: If the store is empty
        MarkerIOError: If the file cannot be written
    """
    path = Path(path)
    listing = render_listing(store, media_name, options)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(listing)
    except OSError as e:
        logger.error(f"Could not open file for writing: {path}: {e}")
        raise MarkerIOError("write", path, e.strerror or str(e)) from e

    logger.info(f"Exported {len(store)} markers to {path}")
    return path
