import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .constants import FALLBACK_MARKERS_FILE, MARKERS_ASS_EXTENSION, MARKERS_TXT_EXTENSION

# Global flag to ensure logging is only set up once
_logging_initialized = False


def setup_logging(log_level=logging.INFO, log_file=None, log_dir=None, console=False):
    """
    Set up logging to a timestamped file, optionally echoing to the console.

    Args:
        log_level: The logging level (default: logging.INFO)
        log_file: Name of the log file (default: 'mpvmarkers_<timestamp>.log')
        log_dir: Directory for log files (default: 'logs' in the working directory)
        console: Also log to stderr

    Returns:
        Path of the log file, or None if logging was already set up
    """
    global _logging_initialized

    # Only set up logging once
    if _logging_initialized:
        return None

    log_dir = Path(log_dir) if log_dir else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"mpvmarkers_{timestamp}.log"

    log_file_path = log_dir / log_file

    # Remove all existing handlers
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    handlers = [logging.FileHandler(log_file_path, mode="a", encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    _logging_initialized = True

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized. Log file: {log_file_path}")

    return log_file_path


def _derived_path(media_path: Union[str, Path], extension: str) -> Path:
    path = Path(media_path)
    # Only a trailing alphanumeric extension is stripped, e.g. "clip.mkv" -> "clip"
    stem = path.stem if path.suffix[1:].isalnum() else path.name
    return path.with_name(stem + extension)


def markers_file_for(media_path: Optional[Union[str, Path]]) -> Path:
    """
    Backing ASS file for a media file: same directory and base name, '.markers.ass'.

    Without a media path the file is 'markers.ass' in the working directory.
    """
    if not media_path:
        return Path(os.getcwd()) / FALLBACK_MARKERS_FILE
    return _derived_path(media_path, MARKERS_ASS_EXTENSION)


def export_file_for(media_path: Union[str, Path]) -> Path:
    """Plain-text export file for a media file: '.markers.txt' next to it."""
    return _derived_path(media_path, MARKERS_TXT_EXTENSION)
