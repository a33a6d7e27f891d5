"""
Replay Frontend Package

Display-side derivations for the playback UI: projection onto a bounded
percentage axis, per-segment marker buckets, and immutable view DTOs.

All outputs are frozen and deterministic; the UI renders them directly.
"""

from .dtos import (
    MarkerBucket,
    SegmentBar,
    PositionedTimelineMarker,
    RenderedEncounter,
    EncounterTimelineView,
    PositionedMarker,
    PlaybackTrackView,
)
from .projection import (
    project,
    project_line,
    project_seconds,
    project_many,
    segment_bar,
    is_renderable_axis,
)
from .bucketing import bucket_markers, MAX_MARKERS_PER_SEGMENT
from .timeline import TimelineConfig, build_encounter_timeline, build_playback_track
from .labels import event_kind_label, marker_kind_label, encounter_category_label, format_time

__all__ = [
    # DTOs
    'MarkerBucket',
    'SegmentBar',
    'PositionedTimelineMarker',
    'RenderedEncounter',
    'EncounterTimelineView',
    'PositionedMarker',
    'PlaybackTrackView',
    # Projection
    'project',
    'project_line',
    'project_seconds',
    'project_many',
    'segment_bar',
    'is_renderable_axis',
    # Bucketing
    'bucket_markers',
    'MAX_MARKERS_PER_SEGMENT',
    # Views
    'TimelineConfig',
    'build_encounter_timeline',
    'build_playback_track',
    # Labels
    'event_kind_label',
    'marker_kind_label',
    'encounter_category_label',
    'format_time',
]
