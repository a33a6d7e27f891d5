"""
API Mapper
==========

Transforms derived timeline structures into JSON-ready dictionaries.
Keys are camelCase to match the playback UI's existing contracts.

MAPPING RULES:
1. Preserve backend ordering
2. Never drop the closure variant; the UI must not infer it
3. Missing optional values are emitted as null, not omitted
"""

from __future__ import annotations
from typing import Any, Dict

from ..contracts.markers import Marker, TimelineMarker
from ..contracts.segments import EncounterSegment
from ..engine import TimelineAnalysis
from replay_frontend.dtos import (
    EncounterTimelineView, MarkerBucket, PlaybackTrackView, SegmentBar,
)


def map_segment(segment: EncounterSegment) -> Dict[str, Any]:
    return {
        "id": segment.segment_id,
        "name": segment.name,
        "category": segment.category.value,
        "zoneName": segment.zone_name,
        "startLine": segment.start_line,
        "endLine": segment.end_line,
        "startTime": segment.start_time,
        "endTime": segment.end_time,
        "closure": segment.closure.value,
    }


def map_timeline_marker(marker: TimelineMarker) -> Dict[str, Any]:
    return {
        "id": marker.marker_id,
        "lineNumber": marker.line_number,
        "eventType": marker.kind.value,
        "timestamp": marker.log_time,
        "source": marker.source,
        "target": marker.target,
        "targetKind": marker.target_kind.value if marker.target_kind else None,
    }


def map_marker(marker: Marker) -> Dict[str, Any]:
    return {
        "id": marker.marker_id,
        "timestamp": marker.timestamp_seconds,
        "type": marker.kind.value,
        "source": marker.source,
        "target": marker.target,
        "targetKind": marker.target_kind.value if marker.target_kind else None,
    }


def _map_bar(bar: SegmentBar) -> Dict[str, Any]:
    return {
        "startPercent": bar.start_percent,
        "widthPercent": bar.width_percent,
        "renderable": bar.is_renderable,
    }


def _map_bucket(bucket: MarkerBucket) -> Dict[str, Any]:
    return {
        "visible": [map_timeline_marker(marker) for marker in bucket.visible],
        "hiddenCount": bucket.hidden_count,
    }


def map_timeline_view(view: EncounterTimelineView) -> Dict[str, Any]:
    return {
        "totalLines": view.total_lines,
        "renderable": view.is_renderable,
        "encounters": [
            {
                "segment": map_segment(encounter.segment),
                "bar": _map_bar(encounter.bar),
                "markers": _map_bucket(encounter.bucket),
                "markerPositions": {
                    positioned.marker.marker_id: positioned.position_percent
                    for positioned in encounter.markers
                },
            }
            for encounter in view.encounters
        ],
    }


def map_analysis(analysis: TimelineAnalysis, view: EncounterTimelineView) -> Dict[str, Any]:
    return {
        "totalLines": analysis.total_lines,
        "rejectedRecordCount": analysis.rejected_record_count,
        "importantEventCount": analysis.important_event_count,
        "eventCounts": analysis.event_counts(),
        "segments": [map_segment(segment) for segment in analysis.segments],
        "playbackMarkers": [map_marker(marker) for marker in analysis.playback_markers],
        "timeline": map_timeline_view(view),
    }


def map_playback_track(track: PlaybackTrackView) -> Dict[str, Any]:
    return {
        "durationSeconds": track.duration_seconds,
        "renderable": track.is_renderable,
        "hiddenNonPlayerCount": track.hidden_non_player_count,
        "markers": [
            dict(map_marker(positioned.marker), positionPercent=positioned.position_percent)
            for positioned in track.markers
        ],
    }
