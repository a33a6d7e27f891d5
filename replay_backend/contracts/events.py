"""
Log Event Contracts
===================

Typed, immutable event records derived from parsed combat-log lines.

The event shape is a tagged union: one frozen dataclass per event family,
each carrying its EventKind tag. Consumers dispatch on the kind through
explicit tables, so adding a kind is a deliberate classification decision.

INVARIANTS:
- Events are read-only once created
- line_number >= 1
- The kind tag always belongs to the dataclass family that carries it
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Mapping, Optional, Union
import logging
import math

logger = logging.getLogger(__name__)

LogTime = Union[float, str]


# =============================================================================
# ENUMERATIONS
# =============================================================================

class EventKind(Enum):
    """Event type tags, valued exactly as the log parser names them."""
    PARTY_KILL = "PARTY_KILL"
    UNIT_DIED = "UNIT_DIED"
    SPELL_INTERRUPT = "SPELL_INTERRUPT"
    SPELL_DISPEL = "SPELL_DISPEL"
    ENCOUNTER_START = "ENCOUNTER_START"
    ENCOUNTER_END = "ENCOUNTER_END"
    MANUAL_MARKER = "MANUAL_MARKER"

    @staticmethod
    def parse(value: Any) -> Optional[EventKind]:
        try:
            return EventKind(value)
        except ValueError:
            return None


class TargetKind(Enum):
    """Actor classification of an event's target."""
    PLAYER = "PLAYER"
    NPC = "NPC"
    PET = "PET"
    GUARDIAN = "GUARDIAN"
    UNKNOWN = "UNKNOWN"

    @staticmethod
    def parse(value: Any) -> Optional[TargetKind]:
        if value is None:
            return None
        try:
            return TargetKind(str(value).upper())
        except ValueError:
            return TargetKind.UNKNOWN


class EncounterCategory(Enum):
    """Game mode an encounter belongs to."""
    MYTHIC_PLUS = "mythicPlus"
    RAID = "raid"
    PVP = "pvp"
    UNKNOWN = "unknown"

    @staticmethod
    def parse(value: Any) -> EncounterCategory:
        if value in ("mythicPlus", "mythic-plus"):
            return EncounterCategory.MYTHIC_PLUS
        try:
            return EncounterCategory(value)
        except ValueError:
            return EncounterCategory.UNKNOWN


COMBAT_ACTION_KINDS: FrozenSet[EventKind] = frozenset({
    EventKind.PARTY_KILL,
    EventKind.UNIT_DIED,
    EventKind.SPELL_INTERRUPT,
    EventKind.SPELL_DISPEL,
})

BOUNDARY_KINDS: FrozenSet[EventKind] = frozenset({
    EventKind.ENCOUNTER_START,
    EventKind.ENCOUNTER_END,
})

# Kinds shown on the log-analysis timeline
IMPORTANT_KINDS: FrozenSet[EventKind] = COMBAT_ACTION_KINDS


# =============================================================================
# EVENT FAMILIES (tagged union)
# =============================================================================

@dataclass(frozen=True)
class LogEvent:
    """
    Common shape of every event.

    log_time is either seconds (numeric) or the log's own timestamp text.
    Only numeric, finite, non-negative times can become playback markers.
    """
    line_number: int
    log_time: LogTime
    kind: EventKind
    zone_name: Optional[str] = None
    encounter_name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.line_number, bool) or not isinstance(self.line_number, int):
            raise ValueError(f"line_number must be an int, got {self.line_number!r}")
        if self.line_number < 1:
            raise ValueError(f"line_number must be >= 1, got {self.line_number}")

    @property
    def time_seconds(self) -> Optional[float]:
        """log_time as seconds, or None when it is not a usable number."""
        value = self.log_time
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or value < 0:
            return None
        return float(value)


@dataclass(frozen=True)
class CombatActionEvent(LogEvent):
    """Kills, deaths, interrupts and dispels."""
    source: Optional[str] = None
    target: Optional[str] = None
    target_kind: Optional[TargetKind] = None

    def __post_init__(self):
        super().__post_init__()
        if self.kind not in COMBAT_ACTION_KINDS:
            raise ValueError(f"{self.kind} is not a combat action kind")


@dataclass(frozen=True)
class EncounterBoundaryEvent(LogEvent):
    """ENCOUNTER_START / ENCOUNTER_END markers."""
    encounter_category: EncounterCategory = EncounterCategory.UNKNOWN

    def __post_init__(self):
        super().__post_init__()
        if self.kind not in BOUNDARY_KINDS:
            raise ValueError(f"{self.kind} is not an encounter boundary kind")

    @property
    def is_start(self) -> bool:
        return self.kind is EventKind.ENCOUNTER_START


@dataclass(frozen=True)
class ManualMarkerEvent(LogEvent):
    """User-triggered marker (hotkey)."""
    label: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if self.kind is not EventKind.MANUAL_MARKER:
            raise ValueError(f"{self.kind} is not a manual marker kind")


# =============================================================================
# RAW RECORD CONVERSION
# =============================================================================

def _line_number(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 1 else None
    if isinstance(value, float) and value.is_integer() and value >= 1:
        return int(value)
    return None


def _log_time(record: Mapping[str, Any]) -> LogTime:
    for key in ("logicalTime", "timestampSeconds", "timestamp", "logTimestamp"):
        value = record.get(key)
        if value is None:
            continue
        # NaN and infinities are kept as text so they never reach a JSON response
        if isinstance(value, float) and not math.isfinite(value):
            return str(value)
        return value
    return ""


def parse_event_record(record: Mapping[str, Any]) -> Optional[LogEvent]:
    """
    Convert one parser record (camelCase dict) into a typed event.

    Returns None for records with an unknown eventType or an unusable
    line number. A single bad record never aborts a batch.
    """
    kind = EventKind.parse(record.get("eventType"))
    if kind is None:
        logger.debug("Skipping record with unknown eventType %r", record.get("eventType"))
        return None

    line_number = _line_number(record.get("lineNumber"))
    if line_number is None:
        logger.debug("Skipping %s record with invalid lineNumber %r", kind.value, record.get("lineNumber"))
        return None

    common = dict(
        line_number=line_number,
        log_time=_log_time(record),
        kind=kind,
        zone_name=record.get("zoneName"),
        encounter_name=record.get("encounterName"),
    )

    if kind in COMBAT_ACTION_KINDS:
        return CombatActionEvent(
            **common,
            source=record.get("source"),
            target=record.get("target"),
            target_kind=TargetKind.parse(record.get("targetKind")),
        )
    if kind in BOUNDARY_KINDS:
        return EncounterBoundaryEvent(
            **common,
            encounter_category=EncounterCategory.parse(record.get("encounterCategory")),
        )
    return ManualMarkerEvent(**common, label=record.get("label"))
