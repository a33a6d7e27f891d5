"""
Event to Marker Translation

Maps qualifying events onto markers. Only kills, deaths and manual markers
reach the playback marker set; interrupts, dispels and encounter boundaries
are analytical-only.

REJECTION RULES:
================
- Kind outside {PARTY_KILL, UNIT_DIED, MANUAL_MARKER} -> None
- Time that is not a finite number >= 0 -> None (protects the sort order)
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging
import math

from ..contracts.events import (
    EventKind, LogEvent, CombatActionEvent, IMPORTANT_KINDS, TargetKind,
)
from ..contracts.markers import Marker, MarkerKind, TimelineMarker

logger = logging.getLogger(__name__)


MARKER_KIND_BY_EVENT_KIND: Dict[EventKind, MarkerKind] = {
    EventKind.PARTY_KILL: MarkerKind.KILL,
    EventKind.UNIT_DIED: MarkerKind.DEATH,
    EventKind.MANUAL_MARKER: MarkerKind.MANUAL,
}


def _actors(event: LogEvent):
    if isinstance(event, CombatActionEvent):
        return event.source, event.target, event.target_kind
    return None, None, None


def translate(event: LogEvent) -> Optional[Marker]:
    """
    Translate a raw event into a playback Marker, or None.

    The marker id combines kind, time and the event's line number, so ids
    are stable across re-translation and never reused within a log.
    """
    marker_kind = MARKER_KIND_BY_EVENT_KIND.get(event.kind)
    if marker_kind is None:
        return None

    seconds = event.time_seconds
    if seconds is None:
        logger.debug(
            "Rejecting %s at line %d: unusable time %r",
            event.kind.value, event.line_number, event.log_time,
        )
        return None

    source, target, target_kind = _actors(event)
    return Marker(
        marker_id=Marker.build_id(marker_kind, seconds, event.line_number),
        timestamp_seconds=seconds,
        kind=marker_kind,
        source=source,
        target=target,
        target_kind=target_kind,
    )


def translate_important_event(record: Mapping[str, Any], index: int) -> Optional[Marker]:
    """
    Translate a recording-metadata important event record.

    index is the record's position in the metadata list and keeps ids unique
    when two records share a kind and timestamp.
    """
    kind = EventKind.parse(record.get("eventType"))
    marker_kind = MARKER_KIND_BY_EVENT_KIND.get(kind) if kind else None
    if marker_kind is None:
        return None

    seconds = record.get("timestampSeconds")
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None

    return Marker(
        marker_id=Marker.build_id(marker_kind, float(seconds), index),
        timestamp_seconds=float(seconds),
        kind=marker_kind,
        source=record.get("source"),
        target=record.get("target"),
        target_kind=TargetKind.parse(record.get("targetKind")),
    )


def translate_all(events: Iterable[LogEvent]) -> List[Marker]:
    """Translate a batch, dropping rejected events."""
    markers = []
    for event in events:
        marker = translate(event)
        if marker is not None:
            markers.append(marker)
    return markers


def timeline_markers_from_events(events: Iterable[LogEvent]) -> List[TimelineMarker]:
    """
    Line-positioned markers for the log-analysis timeline.

    Keeps input order. Only the important combat kinds are included.
    """
    markers = []
    for event in events:
        if event.kind not in IMPORTANT_KINDS:
            continue
        source, target, target_kind = _actors(event)
        markers.append(TimelineMarker(
            marker_id=f"{event.line_number}-{event.kind.value}-{source or ''}-{target or ''}",
            line_number=event.line_number,
            kind=event.kind,
            log_time=event.log_time,
            source=source,
            target=target,
            target_kind=target_kind,
        ))
    return markers
