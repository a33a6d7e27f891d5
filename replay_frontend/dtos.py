"""
Timeline Display DTOs

Read-only, fully calculated structures for the playback UI.

PROHIBITED IN THE UI:
=====================
- Recomputing positions or widths per frame
- Re-bucketing markers by viewport size
- Inferring segment closure from missing fields
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Tuple

from replay_backend.contracts.markers import Marker, TimelineMarker
from replay_backend.contracts.segments import EncounterSegment


@dataclass(frozen=True)
class MarkerBucket:
    """
    Visible/hidden partition of the markers inside one segment.

    len(visible) + hidden_count == markers whose line falls in the segment.
    """
    visible: Tuple[TimelineMarker, ...]
    hidden_count: int

    @property
    def total(self) -> int:
        return len(self.visible) + self.hidden_count

    @staticmethod
    def empty() -> MarkerBucket:
        return MarkerBucket(visible=(), hidden_count=0)


@dataclass(frozen=True)
class SegmentBar:
    """Percentage placement of a segment on the [0, 100] axis."""
    start_percent: float
    width_percent: float
    is_renderable: bool

    @property
    def end_percent(self) -> float:
        return self.start_percent + self.width_percent


@dataclass(frozen=True)
class PositionedTimelineMarker:
    marker: TimelineMarker
    position_percent: float


@dataclass(frozen=True)
class RenderedEncounter:
    """One encounter row: segment, bar, and its capped markers."""
    segment: EncounterSegment
    bar: SegmentBar
    bucket: MarkerBucket
    markers: Tuple[PositionedTimelineMarker, ...]


@dataclass(frozen=True)
class EncounterTimelineView:
    """
    Fully calculated log-analysis timeline.

    DETERMINISTIC:
    Same segments + same markers + same total_lines = identical view.
    """
    total_lines: int
    encounters: Tuple[RenderedEncounter, ...]
    is_renderable: bool

    @property
    def is_empty(self) -> bool:
        """No encounter segments detected (a normal outcome)."""
        return not self.encounters

    def buckets(self) -> Mapping[str, MarkerBucket]:
        return {encounter.segment.segment_id: encounter.bucket for encounter in self.encounters}


@dataclass(frozen=True)
class PositionedMarker:
    marker: Marker
    position_percent: float


@dataclass(frozen=True)
class PlaybackTrackView:
    """Markers placed on the video seek bar."""
    duration_seconds: float
    markers: Tuple[PositionedMarker, ...]
    is_renderable: bool
    hidden_non_player_count: int = 0

    @property
    def is_empty(self) -> bool:
        """No important events recorded (a normal outcome)."""
        return not self.markers
