"""
Marker Bucketer
===============

Partitions the full marker set into per-segment visible/hidden buckets
with a fixed cap, bounding render cost regardless of log size.

RULES:
- Membership: segment.start_line <= marker.line_number <= segment.end_line
- visible: the first `cap` members in input (line/time) order
- hidden_count: max(0, members - cap)
- Deterministic: no randomness, no viewport-dependent cap
"""

from __future__ import annotations
from typing import Dict, Sequence

import numpy as np

from replay_backend.contracts.markers import TimelineMarker
from replay_backend.contracts.segments import EncounterSegment
from .dtos import MarkerBucket

MAX_MARKERS_PER_SEGMENT = 120


def bucket_markers(
    segments: Sequence[EncounterSegment],
    markers: Sequence[TimelineMarker],
    cap: int = MAX_MARKERS_PER_SEGMENT,
) -> Dict[str, MarkerBucket]:
    """
    Build one MarkerBucket per segment, keyed by segment_id.

    Markers are ordered once by line (stable, so input order breaks ties);
    each segment then resolves its members with two binary searches.
    """
    if cap < 0:
        raise ValueError(f"cap must be >= 0, got {cap}")

    if not markers:
        return {segment.segment_id: MarkerBucket.empty() for segment in segments}

    lines = np.fromiter((marker.line_number for marker in markers), dtype=np.int64, count=len(markers))
    order = np.argsort(lines, kind="stable")
    sorted_lines = lines[order]

    buckets: Dict[str, MarkerBucket] = {}
    for segment in segments:
        left = int(np.searchsorted(sorted_lines, segment.start_line, side="left"))
        right = int(np.searchsorted(sorted_lines, segment.end_line, side="right"))
        # Restore input order among the members before capping
        member_indices = np.sort(order[left:right], kind="stable")
        total = len(member_indices)
        visible = tuple(markers[int(index)] for index in member_indices[:cap])
        buckets[segment.segment_id] = MarkerBucket(
            visible=visible,
            hidden_count=max(0, total - cap),
        )
    return buckets
