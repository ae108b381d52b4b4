"""
Exceptions raised by the marker core.

Every failure a user can trigger derives from MarkerError so the marker
manager can turn it into an on-screen message instead of letting it reach
the host player.
"""

from pathlib import Path
from typing import Optional, Union


class MarkerError(Exception):
    """Base class for all marker errors."""


class NoPlaybackPositionError(MarkerError):
    """A marker was requested while the player reports no playback position."""

    def __init__(self, message: str = "No playback position"):
        super().__init__(message)


class EmptyStoreError(MarkerError):
    """An operation needs at least one marker but the store is empty."""

    def __init__(self, message: str = "No markers set"):
        super().__init__(message)


class NoMarkersError(EmptyStoreError):
    """Export was requested on an empty store."""

    def __init__(self, message: str = "No markers to export"):
        super().__init__(message)


class NoMediaError(MarkerError):
    """No media file is loaded, so no file path can be derived."""

    def __init__(self, message: str = "No file is being played"):
        super().__init__(message)


class MarkerIOError(MarkerError):
    """
    Opening, writing or deleting a marker file failed.

    The underlying OSError is chained as ``__cause__``.
    """

    def __init__(
        self,
        action: str,
        path: Union[str, Path],
        reason: Optional[str] = None,
    ):
        self.action = action
        self.path = Path(path)
        self.reason = reason or "unknown error"
        super().__init__(f"Could not {action} {self.path}: {self.reason}")
