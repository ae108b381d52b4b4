"""
Jumping between markers in time order.

Both directions wrap around: past the last marker "next" returns to the
first, and before the first marker "previous" goes to the last. A small
tolerance keeps a jump from landing on the marker the player is already
sitting on.
"""

import logging
from typing import Optional

import numpy as np

from .constants import NAVIGATION_EPSILON
from .errors import EmptyStoreError
from .marker_store import Marker, MarkerStore

logger = logging.getLogger(__name__)


def _time_index(store: MarkerStore):
    ordered = store.by_time_ascending()
    if not ordered:
        raise EmptyStoreError("No markers set")
    times = np.fromiter((m.time for m in ordered), dtype=np.float64, count=len(ordered))
    return ordered, times


def previous_marker(
    store: MarkerStore,
    current_time: Optional[float],
    epsilon: float = NAVIGATION_EPSILON,
) -> Marker:
    """
    Find the marker to jump to when going backwards.

    Args:
        store: Markers to search
        current_time: Playback position in seconds (None is treated as 0)
        epsilon: Markers within this many seconds before current_time are skipped

    Returns:
        The last marker strictly earlier than current_time - epsilon, or the
        latest marker if there is none

    Raises:
        EmptyStoreError: If the store has no markers
    """
    ordered, times = _time_index(store)
    position = 0.0 if current_time is None else current_time
    # Number of markers with time < position - epsilon
    count = int(np.searchsorted(times, position - epsilon, side="left"))
    target = ordered[count - 1] if count > 0 else ordered[-1]
    logger.debug(f"Previous marker from {position:.3f}s: {target.id} at {target.time:.3f}s")
    return target


def next_marker(
    store: MarkerStore,
    current_time: Optional[float],
    epsilon: float = NAVIGATION_EPSILON,
) -> Marker:
    """
    Find the marker to jump to when going forwards.

    Returns the first marker strictly later than current_time + epsilon, or
    the earliest marker if there is none. Raises EmptyStoreError on an empty
    store.
    """
    ordered, times = _time_index(store)
    position = 0.0 if current_time is None else current_time
    # Index of the first marker with time > position + epsilon
    index = int(np.searchsorted(times, position + epsilon, side="right"))
    target = ordered[index] if index < len(ordered) else ordered[0]
    logger.debug(f"Next marker from {position:.3f}s: {target.id} at {target.time:.3f}s")
    return target
