"""
mpvmarkers

Time markers for media files played in mpv, persisted in an ASS file next
to the media file.
"""

from .config import MarkerOptions, load_options
from .errors import (
    EmptyStoreError,
    MarkerError,
    MarkerIOError,
    NoMarkersError,
    NoMediaError,
    NoPlaybackPositionError,
)
from .marker_manager import MarkerManager
from .marker_store import Marker, MarkerStore

__all__ = [
    'Marker',
    'MarkerStore',
    'MarkerManager',
    'MarkerOptions',
    'load_options',
    'MarkerError',
    'NoPlaybackPositionError',
    'EmptyStoreError',
    'NoMarkersError',
    'NoMediaError',
    'MarkerIOError',
]
