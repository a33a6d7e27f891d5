"""
Ordered Marker Index
====================

Timestamp-ordered marker storage for one playback session.

INVARIANTS:
- Sorted ascending by timestamp_seconds at every observable point
- Ties keep insertion order (stable)
- Readers only ever receive tuple snapshots, never the backing list

WRITERS:
- Live ingestion: insert(), one call per incoming log line
- Bulk load: replace_all(), once per recorded session
The owning PlaybackSession guarantees both are never active together.
"""

from __future__ import annotations
from bisect import bisect_left, bisect_right
from typing import Iterable, Iterator, List, Optional, Tuple

from ..contracts.markers import Marker
from .actors import is_hidden_for_non_player_filter


class OrderedMarkerIndex:
    """
    Array-backed sorted marker collection.

    Insertion is O(log N) comparisons plus O(N) shift. Realtime ingestion is
    almost always append-only, so a marker at or after the current maximum
    takes an O(1) append instead.
    """

    def __init__(self, markers: Optional[Iterable[Marker]] = None):
        self._markers: List[Marker] = []
        # Parallel key list for bisect (derived, not authoritative)
        self._timestamps: List[float] = []
        if markers is not None:
            self.replace_all(markers)

    # =========================================================================
    # WRITES
    # =========================================================================

    def insert(self, marker: Marker) -> int:
        """
        Insert a marker, keeping the collection sorted.

        Returns the position the marker was stored at.
        """
        timestamp = marker.timestamp_seconds

        # Fast path: append at or after the current maximum
        if not self._timestamps or timestamp >= self._timestamps[-1]:
            self._markers.append(marker)
            self._timestamps.append(timestamp)
            return len(self._markers) - 1

        # bisect_right places the marker after existing equal timestamps
        position = bisect_right(self._timestamps, timestamp)
        self._markers.insert(position, marker)
        self._timestamps.insert(position, timestamp)
        return position

    def replace_all(self, markers: Iterable[Marker]) -> None:
        """Atomically replace the collection with a stably sorted copy."""
        ordered = sorted(markers, key=lambda marker: marker.timestamp_seconds)
        self._markers = ordered
        self._timestamps = [marker.timestamp_seconds for marker in ordered]

    def clear(self) -> None:
        self._markers = []
        self._timestamps = []

    # =========================================================================
    # READS (snapshots)
    # =========================================================================

    @property
    def markers(self) -> Tuple[Marker, ...]:
        return tuple(self._markers)

    @property
    def latest(self) -> Optional[Marker]:
        return self._markers[-1] if self._markers else None

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[Marker]:
        return iter(self.markers)

    def __bool__(self) -> bool:
        return bool(self._markers)

    def markers_between(self, start_seconds: float, end_seconds: float) -> Tuple[Marker, ...]:
        """Markers with start <= timestamp <= end."""
        if end_seconds < start_seconds:
            return ()
        left = bisect_left(self._timestamps, start_seconds)
        right = bisect_right(self._timestamps, end_seconds)
        return tuple(self._markers[left:right])

    def next_marker_after(self, seconds: float) -> Optional[Marker]:
        """First marker strictly after the given playback time."""
        position = bisect_right(self._timestamps, seconds)
        if position < len(self._markers):
            return self._markers[position]
        return None

    def previous_marker_before(self, seconds: float) -> Optional[Marker]:
        """Last marker strictly before the given playback time."""
        position = bisect_left(self._timestamps, seconds)
        if position > 0:
            return self._markers[position - 1]
        return None

    def visible_markers(self, hide_non_player: bool = False) -> Tuple[Marker, ...]:
        """
        Filtering view, recomputed on every read.

        With hide_non_player set, markers whose target resolves to a
        non-player actor are excluded.
        """
        if not hide_non_player:
            return self.markers
        return tuple(
            marker for marker in self._markers
            if not is_hidden_for_non_player_filter(marker.target, marker.target_kind)
        )

