#!/usr/bin/env python3
"""
Command-line tool for managing the markers saved next to a media file.

Usage:
    mpv-markers <command> <media_file> [options]

Examples:
    mpv-markers list movie.mkv
    mpv-markers add movie.mkv 1:02:03.45
    mpv-markers export movie.mkv
    mpv-markers play movie.mkv
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from .config import MarkerOptions, load_options
from .errors import EmptyStoreError
from .marker_manager import MarkerManager
from .navigation import next_marker, previous_marker
from .playback import MpvIpcClient
from .timecode import encode_display, try_decode_storage
from .utils import setup_logging

logger = logging.getLogger(__name__)


class OfflineHost:
    """
    Host used when no player is running: the position is given on the
    command line and messages are printed.
    """

    def __init__(self, media_path: str, time_pos: Optional[float] = None):
        self.media_path = media_path
        self.time_pos = time_pos
        self.seeks: List[float] = []

    def get_time_pos(self) -> Optional[float]:
        return self.time_pos

    def get_path(self) -> Optional[str]:
        return self.media_path

    def seek(self, seconds: float) -> None:
        self.seeks.append(seconds)
        self.time_pos = seconds

    def show_message(self, text: str, duration: float) -> None:
        print(text)


def parse_time(value: str) -> float:
    """Accept plain seconds ('75.5') or an ASS timestamp ('0:01:15.50')."""
    try:
        seconds = float(value)
    except ValueError:
        seconds = try_decode_storage(value)
        if seconds is None:
            raise argparse.ArgumentTypeError(f"invalid time: {value!r}")
    if not math.isfinite(seconds):
        raise argparse.ArgumentTypeError(f"time must be finite: {value!r}")
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"time must not be negative: {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpv-markers",
        description="Manage time markers stored in a .markers.ass file next to a media file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Show the saved markers:
        mpv-markers list movie.mkv

    Add a marker at 75.5 seconds:
        mpv-markers add movie.mkv 75.5

    Find the marker after 1 minute:
        mpv-markers next movie.mkv 60

    Play in mpv with marker key bindings:
        mpv-markers play movie.mkv
        """,
    )
    parser.add_argument("--config", type=str, default=None, help="Options file (default: mpv script-opts/auto_markers.conf)")
    parser.add_argument("--prefix", type=str, default=None, help="Marker label prefix (default: Marker)")
    parser.add_argument(
        "--display-duration",
        type=float,
        default=None,
        help="Seconds between start and end of each saved marker record",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in [
        ("list", "Print the saved markers"),
        ("remove-last", "Remove the most recently added marker"),
        ("clear", "Remove all markers"),
        ("export", "Write markers to a .markers.txt file"),
        ("play", "Play the file in mpv with marker key bindings"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("media_file", type=str, help="Path to the media file")

    for name, help_text in [
        ("add", "Add a marker at TIME"),
        ("next", "Show the marker after TIME"),
        ("prev", "Show the marker before TIME"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("media_file", type=str, help="Path to the media file")
        sub.add_argument("time", type=parse_time, help="Seconds or H:MM:SS.CC")

    return parser


def _list_markers(manager: MarkerManager) -> int:
    if not manager.store:
        print("No markers set")
        return 0
    prefix = manager.options.marker_prefix
    for marker in manager.store.by_id_ascending():
        print(f"{marker.id:02d}\t{encode_display(marker.time)}\t{marker.label(prefix)}")
    return 0


def _find_marker(manager: MarkerManager, command: str, time: float) -> int:
    find = next_marker if command == "next" else previous_marker
    try:
        target = find(manager.store, time)
    except EmptyStoreError as e:
        print(e)
        return 1
    print(f"{target.id:02d}\t{encode_display(target.time)}\t{target.label(manager.options.marker_prefix)}")
    return 0


def _play(media_file: str, options: MarkerOptions) -> int:
    client = MpvIpcClient()
    if not client.start_playback(media_file):
        print("Could not start mpv", file=sys.stderr)
        return 1

    manager = MarkerManager(client, options)
    try:
        client.bind_keys()
        client.run_event_loop(manager.handle_event)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        client.terminate()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        log_level=logging.DEBUG if args.verbose else logging.INFO,
        console=args.verbose,
    )

    try:
        options = load_options(args.config).with_overrides(
            marker_prefix=args.prefix,
            marker_display_duration=args.display_duration,
        )
    except ValueError as e:
        parser.error(str(e))

    media_file = str(Path(args.media_file))
    if args.command == "play":
        return _play(media_file, options)

    host = OfflineHost(media_file, getattr(args, "time", None))
    manager = MarkerManager(host, options)
    manager.on_file_loaded()

    if args.command == "list":
        return _list_markers(manager)
    if args.command in ("next", "prev"):
        return _find_marker(manager, args.command, args.time)

    message = {
        "add": manager.add_marker,
        "remove-last": manager.remove_last_marker,
        "clear": manager.clear_markers,
        "export": manager.export_markers_text,
    }[args.command]()

    logger.debug(f"{args.command}: {message}")
    return 0 if manager.last_ok else 1


if __name__ == "__main__":
    sys.exit(main())
