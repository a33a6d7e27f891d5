"""
Replay Backend Contracts

Immutable data types shared across the backend and frontend packages.
"""

from .base import ErrorCode, Error, Result
from .events import (
    EventKind,
    TargetKind,
    EncounterCategory,
    LogEvent,
    CombatActionEvent,
    EncounterBoundaryEvent,
    ManualMarkerEvent,
    COMBAT_ACTION_KINDS,
    BOUNDARY_KINDS,
    IMPORTANT_KINDS,
    parse_event_record,
)
from .markers import MarkerKind, Marker, TimelineMarker
from .segments import (
    SegmentClosure,
    EncounterSegment,
    UNKNOWN_ENCOUNTER_NAME,
    encounter_key,
)

__all__ = [
    # Errors
    'ErrorCode',
    'Error',
    'Result',
    # Events
    'EventKind',
    'TargetKind',
    'EncounterCategory',
    'LogEvent',
    'CombatActionEvent',
    'EncounterBoundaryEvent',
    'ManualMarkerEvent',
    'COMBAT_ACTION_KINDS',
    'BOUNDARY_KINDS',
    'IMPORTANT_KINDS',
    'parse_event_record',
    # Markers
    'MarkerKind',
    'Marker',
    'TimelineMarker',
    # Segments
    'SegmentClosure',
    'EncounterSegment',
    'UNKNOWN_ENCOUNTER_NAME',
    'encounter_key',
]
