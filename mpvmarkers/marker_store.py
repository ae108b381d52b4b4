import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import EmptyStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    """
    A named point in time within a media file.

    Attributes:
        time: Offset into the media in seconds, fixed at creation
        id: Sequence number assigned at creation, unique within a store
    """

    time: float
    id: int

    def label(self, prefix: str) -> str:
        """Text label used in the ASS file and in exports, e.g. ``Marker 07``."""
        return f"{prefix} {self.id:02d}"


class MarkerStore:
    """
    Ordered collection of markers for one media file.

    Markers live in an append-only slot list; a removed marker leaves an
    empty slot behind instead of shifting the others. The id and
    time orderings are derived views, built on first use and cached until
    the next mutation.
    """

    def __init__(self):
        self._slots: List[Optional[Marker]] = []
        self._live: int = 0
        self._next_id: int = 1

        self._by_id: Optional[Tuple[Marker, ...]] = None
        self._by_time: Optional[Tuple[Marker, ...]] = None

        # Callbacks for when markers change
        self._change_callbacks: List[Callable[[], None]] = []

    def __len__(self) -> int:
        return self._live

    def __bool__(self) -> bool:
        return self._live > 0

    def __iter__(self) -> Iterator[Marker]:
        return iter(self.by_id_ascending())

    def __repr__(self) -> str:
        return f"MarkerStore(markers={len(self)}, next_id={self._next_id})"

    @property
    def next_id(self) -> int:
        """Id the next added marker will receive."""
        return self._next_id

    def register_change_callback(self, callback: Callable[[], None]) -> None:
        """
        Register a callback function to be called when markers change.

        Args:
            callback: A function to be called after every mutation
        """
        self._change_callbacks.append(callback)

    def _changed(self) -> None:
        self._by_id = None
        self._by_time = None
        for callback in self._change_callbacks:
            callback()

    def add(self, time: float) -> Marker:
        """
        Add a marker at the given time with the next sequential id.

        Args:
            time: Non-negative playback position in seconds

        Returns:
            The new marker
        """
        if time is None or not math.isfinite(time) or time < 0:
            raise ValueError(f"Marker time must be a finite, non-negative number, got {time!r}")

        marker = Marker(time=float(time), id=self._next_id)
        self._slots.append(marker)
        self._live += 1
        self._next_id += 1
        logger.debug(f"Added marker {marker.id} at {marker.time:.3f}s")
        self._changed()
        return marker

    def remove_last(self) -> Marker:
        """
        Remove the marker with the highest id.

        Returns:
            The removed marker

        Raises:
            EmptyStoreError: If there is nothing to remove
        """
        if not self._live:
            raise EmptyStoreError("No markers to remove")

        index, removed = max(
            ((i, m) for i, m in enumerate(self._slots) if m is not None),
            key=lambda pair: pair[1].id,
        )
        self._slots[index] = None
        self._live -= 1
        self._compact()
        logger.debug(f"Removed marker {removed.id}")
        self._changed()
        return removed

    def clear(self) -> int:
        """Remove all markers and return how many there were."""
        count = self._live
        if count == 0:
            return 0
        self._slots = []
        self._live = 0
        self._changed()
        return count

    def load_replace(self, markers: Iterable[Marker]) -> None:
        """
        Replace the whole collection, e.g. with markers read from disk.

        ``next_id`` becomes one more than the highest id supplied, or 1.
        When ids repeat, the first occurrence wins.
        """
        seen: Dict[int, Marker] = {}
        for marker in markers:
            if marker.id in seen:
                logger.warning(f"Ignoring duplicate marker id {marker.id}")
                continue
            seen[marker.id] = marker

        self._slots = sorted(seen.values(), key=lambda m: m.id)
        self._live = len(self._slots)
        self._next_id = max(seen, default=0) + 1
        self._changed()

    def get(self, marker_id: int) -> Optional[Marker]:
        """Return the marker with the given id, if present."""
        for marker in self._slots:
            if marker is not None and marker.id == marker_id:
                return marker
        return None

    def by_id_ascending(self) -> Tuple[Marker, ...]:
        """Markers in creation order."""
        if self._by_id is None:
            self._by_id = tuple(
                sorted((m for m in self._slots if m is not None), key=lambda m: m.id)
            )
        return self._by_id

    def by_time_ascending(self) -> Tuple[Marker, ...]:
        """Markers in temporal order; equal times are ordered by id."""
        if self._by_time is None:
            self._by_time = tuple(
                sorted(self.by_id_ascending(), key=lambda m: (m.time, m.id))
            )
        return self._by_time

    def _compact(self) -> None:
        """Drop empty trailing slots, and rebuild once half the slots are empty."""
        while self._slots and self._slots[-1] is None:
            self._slots.pop()
        if len(self._slots) > 2 * self._live:
            self._slots = [m for m in self._slots if m is not None]
