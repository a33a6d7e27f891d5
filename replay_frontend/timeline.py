"""
Timeline View Builders

Responsibility:
Deterministic transformation of derived backend structures into
renderable views, computed once per data change (never per frame).

- build_encounter_timeline: segments + line markers -> EncounterTimelineView
- build_playback_track: playback markers + duration -> PlaybackTrackView
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from replay_backend.contracts.markers import Marker, TimelineMarker
from replay_backend.contracts.segments import EncounterSegment
from replay_backend.markers.actors import is_hidden_for_non_player_filter
from .bucketing import MAX_MARKERS_PER_SEGMENT, bucket_markers
from .dtos import (
    EncounterTimelineView, MarkerBucket, PlaybackTrackView, PositionedMarker,
    PositionedTimelineMarker, RenderedEncounter,
)
from .projection import (
    DEFAULT_MIN_SEGMENT_WIDTH_PERCENT, LINE_AXIS_START, SECONDS_AXIS_START,
    is_renderable_axis, project_many, segment_bar,
)


@dataclass
class TimelineConfig:
    """Configuration for timeline views."""
    marker_cap: int = MAX_MARKERS_PER_SEGMENT
    min_segment_width_percent: float = DEFAULT_MIN_SEGMENT_WIDTH_PERCENT

    def __post_init__(self):
        if self.marker_cap < 0:
            raise ValueError(f"marker_cap must be >= 0, got {self.marker_cap}")
        if not 0 <= self.min_segment_width_percent <= 100:
            raise ValueError("min_segment_width_percent must be within [0, 100]")


def build_encounter_timeline(
    segments: Sequence[EncounterSegment],
    markers: Sequence[TimelineMarker],
    total_lines: int,
    config: Optional[TimelineConfig] = None,
) -> EncounterTimelineView:
    config = config or TimelineConfig()
    buckets = bucket_markers(segments, markers, cap=config.marker_cap)
    renderable = is_renderable_axis(total_lines)

    encounters = []
    for segment in segments:
        bucket = buckets.get(segment.segment_id, MarkerBucket.empty())
        if renderable:
            positions = project_many(
                [marker.line_number for marker in bucket.visible], LINE_AXIS_START, total_lines
            )
            positioned = tuple(
                PositionedTimelineMarker(marker=marker, position_percent=float(position))
                for marker, position in zip(bucket.visible, positions)
            )
        else:
            positioned = ()
        encounters.append(RenderedEncounter(
            segment=segment,
            bar=segment_bar(segment, total_lines, config.min_segment_width_percent),
            bucket=bucket,
            markers=positioned,
        ))

    return EncounterTimelineView(
        total_lines=total_lines,
        encounters=tuple(encounters),
        is_renderable=renderable,
    )


def build_playback_track(
    markers: Iterable[Marker],
    duration_seconds: Optional[float],
    hide_non_player: bool = False,
) -> PlaybackTrackView:
    """
    Place playback markers on the seek bar.

    While the duration is unknown the track is not renderable and carries
    no positioned markers.
    """
    shown = []
    hidden = 0
    for marker in markers:
        if hide_non_player and is_hidden_for_non_player_filter(marker.target, marker.target_kind):
            hidden += 1
        else:
            shown.append(marker)

    renderable = is_renderable_axis(duration_seconds)
    if not renderable:
        return PlaybackTrackView(
            duration_seconds=duration_seconds or 0.0,
            markers=(),
            is_renderable=False,
            hidden_non_player_count=hidden,
        )

    positions = project_many(
        [marker.timestamp_seconds for marker in shown], SECONDS_AXIS_START, duration_seconds
    )
    return PlaybackTrackView(
        duration_seconds=float(duration_seconds),
        markers=tuple(
            PositionedMarker(marker=marker, position_percent=float(position))
            for marker, position in zip(shown, positions)
        ),
        is_renderable=True,
        hidden_non_player_count=hidden,
    )
