import logging
import math
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .config import MarkerOptions
from .constants import HELP_OSD_DURATION
from .errors import (
    EmptyStoreError,
    MarkerIOError,
    NoMarkersError,
    NoMediaError,
    NoPlaybackPositionError,
)
from .export import export_markers
from .marker_store import Marker, MarkerStore
from .navigation import next_marker, previous_marker
from .persistence import ParseResult, delete_markers_file, load_markers, save_markers
from .playback import PlaybackHost
from .timecode import encode_display
from .utils import export_file_for, markers_file_for

logger = logging.getLogger(__name__)

HELP_TEXT = """Auto Markers Help:
  +            : Add marker at current position
  Ctrl++       : Remove last marker
  Ctrl+Shift++ : Clear all markers
  Ctrl+e       : Export markers to text
  Ctrl+Left    : Jump to previous marker
  Ctrl+Right   : Jump to next marker
"""


class MarkerManager:
    """
    Handles marker triggers for the media file currently playing.

    Every handler shows a short message through the host and returns it.
    Mutations are written to the backing ASS file before the handler
    returns; when that write fails the message says so and the markers in
    memory are kept as they are.
    """

    def __init__(
        self,
        host: PlaybackHost,
        options: Optional[MarkerOptions] = None,
        store: Optional[MarkerStore] = None,
    ):
        self.host = host
        self.options = options or MarkerOptions()
        self.store = store if store is not None else MarkerStore()
        self.last_load: Optional[ParseResult] = None
        # False when the last handler reported a failure or had nothing to do
        self.last_ok: bool = True

        self._actions: Dict[str, Callable[[], Optional[str]]] = {
            "add_marker": self.add_marker,
            "remove_last_marker": self.remove_last_marker,
            "clear_markers": self.clear_markers,
            "export_markers_text": self.export_markers_text,
            "goto_previous_marker": self.goto_previous_marker,
            "goto_next_marker": self.goto_next_marker,
            "show_help": self.show_help,
        }

    @property
    def markers_path(self) -> Path:
        """Backing ASS file for the current media."""
        return markers_file_for(self.host.get_path())

    def _show(self, text: str, duration: Optional[float] = None, ok: bool = True) -> str:
        self.last_ok = ok
        self.host.show_message(text, self.options.osd_duration if duration is None else duration)
        return text

    def _describe(self, marker: Marker) -> Tuple[str, str]:
        return f"{marker.id:02d}", encode_display(marker.time)

    def _persist(self, message: str) -> str:
        """Write the store to disk, then show ``message`` or the write failure."""
        try:
            save_markers(self.markers_path, self.store, self.options)
        except MarkerIOError as e:
            return self._show(f"Could not save markers: {e.reason}", self.options.osd_duration * 2, ok=False)
        return self._show(message)

    def _current_position(self) -> float:
        position = self.host.get_time_pos()
        if position is None or not math.isfinite(position) or position < 0:
            raise NoPlaybackPositionError()
        return position

    def on_file_loaded(self) -> str:
        """Replace the markers with the ones saved for the newly loaded file."""
        path = self.markers_path
        self.last_load = load_markers(path, self.store, self.options)
        message = f"Loaded {len(self.store)} previous marker(s) from {path.name}"
        if self.last_load.skipped:
            logger.info(f"Skipped {len(self.last_load.skipped)} unreadable marker line(s) in {path}")
        return message

    def add_marker(self) -> str:
        """Add a marker at the current playback position."""
        try:
            position = self._current_position()
        except NoPlaybackPositionError as e:
            logger.warning(f"Cannot add marker: {e}")
            return self._show(f"Cannot add marker: {e}", ok=False)

        marker = self.store.add(position)
        marker_id, display_time = self._describe(marker)
        logger.info(f"Marker {marker_id} set at {display_time}")
        return self._persist(f"Marker {marker_id} set at {display_time}")

    def remove_last_marker(self) -> str:
        """Remove the most recently added marker."""
        try:
            removed = self.store.remove_last()
        except EmptyStoreError:
            return self._show("No markers to remove", ok=False)

        marker_id, display_time = self._describe(removed)
        logger.info(f"Removed marker {marker_id} at {display_time}")
        return self._persist(f"Removed marker {marker_id} at {display_time}")

    def clear_markers(self) -> str:
        """Remove every marker and delete the backing file."""
        count = self.store.clear()
        if count == 0:
            return self._show("No markers to clear", ok=False)

        path = self.markers_path
        try:
            delete_markers_file(path)
        except MarkerIOError as e:
            return self._show(f"Could not delete {path.name}: {e.reason}", self.options.osd_duration * 2, ok=False)

        logger.info(f"Cleared {count} markers, deleted {path}")
        return self._show(f"Cleared {count} markers")

    def export_markers_text(self) -> str:
        """Export the markers to a text file next to the media file."""
        try:
            if not self.store:
                raise NoMarkersError()
            media_path = self.host.get_path()
            if not media_path:
                raise NoMediaError()
            export_path = export_markers(
                export_file_for(media_path), self.store, Path(media_path).name, self.options
            )
        except (NoMarkersError, NoMediaError) as e:
            return self._show(str(e), ok=False)
        except MarkerIOError as e:
            return self._show(f"Text export failed: {e.reason}", self.options.osd_duration * 2, ok=False)

        return self._show(f"Exported markers to {export_path}", self.options.osd_duration * 2)

    def _jump(self, find: Callable[[MarkerStore, Optional[float]], Marker]) -> str:
        try:
            target = find(self.store, self.host.get_time_pos())
        except EmptyStoreError:
            return self._show("No markers set", ok=False)

        self.host.seek(target.time)
        marker_id, display_time = self._describe(target)
        return self._show(f"Jumped to marker {marker_id} ({display_time})")

    def goto_previous_marker(self) -> str:
        """Seek to the previous marker in time, wrapping to the last one."""
        return self._jump(previous_marker)

    def goto_next_marker(self) -> str:
        """Seek to the next marker in time, wrapping to the first one."""
        return self._jump(next_marker)

    def show_help(self) -> str:
        return self._show(HELP_TEXT, HELP_OSD_DURATION)

    def handle_action(self, action: str) -> Optional[str]:
        """Run the handler bound to ``action``; unknown actions are logged and ignored."""
        handler = self._actions.get(action)
        if handler is None:
            logger.warning(f"Unknown marker action: {action}")
            return None
        return handler()

    def handle_event(self, event: Dict[str, Any]) -> Optional[str]:
        """Dispatch an mpv IPC event (file-loaded or a script message)."""
        name = event.get("event")
        if name == "file-loaded":
            return self.on_file_loaded()
        if name == "client-message":
            args = event.get("args") or []
            if len(args) >= 2:
                return self.handle_action(args[1])
        return None
