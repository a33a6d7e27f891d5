"""Display labels and time formatting."""

from __future__ import annotations
from typing import Optional, Union
import math

from replay_backend.contracts.events import EncounterCategory, EventKind
from replay_backend.contracts.markers import MarkerKind

EVENT_KIND_LABELS = {
    EventKind.PARTY_KILL: "Kill",
    EventKind.UNIT_DIED: "Death",
    EventKind.SPELL_INTERRUPT: "Interrupt",
    EventKind.SPELL_DISPEL: "Dispel",
    EventKind.MANUAL_MARKER: "Manual Marker",
    EventKind.ENCOUNTER_START: "Encounter Start",
    EventKind.ENCOUNTER_END: "Encounter End",
}

MARKER_KIND_LABELS = {
    MarkerKind.KILL: "Kill",
    MarkerKind.DEATH: "Death",
    MarkerKind.MANUAL: "Manual Marker",
}

CATEGORY_LABELS = {
    EncounterCategory.MYTHIC_PLUS: "Mythic+",
    EncounterCategory.RAID: "Raid",
    EncounterCategory.PVP: "PvP",
    EncounterCategory.UNKNOWN: "Unknown",
}


def event_kind_label(kind: Union[EventKind, str]) -> str:
    """Unknown kind strings are shown verbatim."""
    parsed = kind if isinstance(kind, EventKind) else EventKind.parse(kind)
    if parsed is None:
        return str(kind)
    return EVENT_KIND_LABELS[parsed]


def marker_kind_label(kind: MarkerKind) -> str:
    return MARKER_KIND_LABELS[kind]


def encounter_category_label(category: Optional[Union[EncounterCategory, str]]) -> str:
    if not category:
        return CATEGORY_LABELS[EncounterCategory.UNKNOWN]
    if isinstance(category, EncounterCategory):
        return CATEGORY_LABELS[category]
    parsed = EncounterCategory.parse(category)
    if parsed is EncounterCategory.UNKNOWN:
        # Unlisted categories keep their own name, capitalised
        return category[0].upper() + category[1:]
    return CATEGORY_LABELS[parsed]


def format_time(seconds: Optional[float]) -> str:
    """m:ss; 0:00 for missing or non-finite input."""
    if not seconds or not math.isfinite(seconds):
        return "0:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
