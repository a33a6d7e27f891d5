"""
Integration Test Fixtures

Versioned parsed-log and recording fixtures for deterministic testing.
All fixtures are explicit - no random generation.
"""

from typing import Any, Dict, List

from replay_backend.contracts.markers import Marker, MarkerKind
from replay_backend.metadata import (
    ParsedCombatLog,
    RecordingImportantEventMetadata,
    RecordingMetadata,
)


# =============================================================================
# RAID LOG (boss pulled three times, one stray END)
# =============================================================================
#
#  line  1  ENCOUNTER_START Boss/raid        pull 1
#  line  3  PARTY_KILL      Add (NPC)
#  line  5  UNIT_DIED       Bob-Realm
#  line  7  SPELL_INTERRUPT Caster
#  line 10  ENCOUNTER_END   Boss/raid        pull 1 closed
#  line 12  MANUAL_MARKER
#  line 15  ENCOUNTER_START Boss/raid        pull 2
#  line 18  PARTY_KILL      Boss (NPC)
#  line 20  ENCOUNTER_START Boss/raid        pull 3, closes pull 2 at 19
#  line 25  ENCOUNTER_END   Trash/mythicPlus no START
#  line 30  SPELL_DISPEL    Alice-Realm
#  EOF  40                                   pull 3 open-ended

RAID_LOG_TOTAL_LINES = 40
RAID_ZONE = "Nerub-ar Palace"


def raid_log_records() -> List[Dict[str, Any]]:
    return [
        {"lineNumber": 1, "eventType": "ENCOUNTER_START", "logicalTime": 0.0,
         "encounterName": "Boss", "encounterCategory": "raid", "zoneName": RAID_ZONE},
        {"lineNumber": 2, "eventType": "SPELL_DAMAGE", "logicalTime": 1.0},
        {"lineNumber": 3, "eventType": "PARTY_KILL", "logicalTime": 5.0,
         "source": "Alice-Realm", "target": "Add", "targetKind": "NPC"},
        {"lineNumber": 5, "eventType": "UNIT_DIED", "logicalTime": 8.0, "target": "Bob-Realm"},
        {"lineNumber": 7, "eventType": "SPELL_INTERRUPT", "logicalTime": 9.0,
         "source": "Alice-Realm", "target": "Caster"},
        {"lineNumber": 10, "eventType": "ENCOUNTER_END", "logicalTime": 20.0,
         "encounterName": "Boss", "encounterCategory": "raid"},
        {"lineNumber": 12, "eventType": "MANUAL_MARKER", "logicalTime": 22.0},
        {"lineNumber": 15, "eventType": "ENCOUNTER_START", "logicalTime": 30.0,
         "encounterName": "Boss", "encounterCategory": "raid"},
        {"lineNumber": 18, "eventType": "PARTY_KILL", "logicalTime": 35.0,
         "source": "Alice-Realm", "target": "Boss", "targetKind": "NPC"},
        {"lineNumber": 0, "eventType": "UNIT_DIED", "logicalTime": 36.0},
        {"lineNumber": 20, "eventType": "ENCOUNTER_START", "logicalTime": 40.0,
         "encounterName": "Boss", "encounterCategory": "raid"},
        {"lineNumber": 25, "eventType": "ENCOUNTER_END", "logicalTime": 50.0,
         "encounterName": "Trash", "encounterCategory": "mythicPlus"},
        {"lineNumber": 30, "eventType": "SPELL_DISPEL", "logicalTime": 55.0,
         "source": "Bob-Realm", "target": "Alice-Realm"},
    ]


RAID_LOG_REJECTED_RECORDS = 2

RAID_LOG_SEGMENT_IDS = (
    "Boss:raid-1",
    "Boss:raid-15",
    "Boss:raid-20",
    "Trash:mythicPlus-25",
)


def create_raid_log() -> ParsedCombatLog:
    return ParsedCombatLog(
        total_lines=RAID_LOG_TOTAL_LINES,
        parsed_events=raid_log_records(),
        file_path="WoWCombatLog-raid.txt",
    )


def raid_log_document() -> Dict[str, Any]:
    """The same log as the parser serializes it (camelCase JSON)."""
    return {
        "totalLines": RAID_LOG_TOTAL_LINES,
        "parsedEvents": raid_log_records(),
        "filePath": "WoWCombatLog-raid.txt",
        "truncated": False,
    }


# =============================================================================
# RECORDING METADATA
# =============================================================================

def create_recording_metadata(recording_file: str = "raid.mp4") -> RecordingMetadata:
    """Sidecar with two kills, a death, a manual marker and an interrupt."""
    events = [
        RecordingImportantEventMetadata(
            timestamp_seconds=42.0, event_type="PARTY_KILL",
            source="Alice-Realm", target="Add", target_kind="NPC",
        ),
        RecordingImportantEventMetadata(
            timestamp_seconds=12.5, event_type="UNIT_DIED", target="Bob-Realm",
        ),
        RecordingImportantEventMetadata(
            timestamp_seconds=20.0, event_type="SPELL_INTERRUPT",
            source="Alice-Realm", target="Caster",
        ),
        RecordingImportantEventMetadata(
            timestamp_seconds=30.0, event_type="MANUAL_MARKER",
        ),
        RecordingImportantEventMetadata(
            timestamp_seconds=75.0, event_type="PARTY_KILL",
            source="Alice-Realm", target="Carol-Realm",
        ),
    ]
    return RecordingMetadata(
        schema_version=1,
        recording_file=recording_file,
        zone_name=RAID_ZONE,
        encounter_name="Boss",
        encounter_category="raid",
        important_events=events,
        important_event_counts={"PARTY_KILL": 2, "UNIT_DIED": 1, "SPELL_INTERRUPT": 1, "MANUAL_MARKER": 1},
        captured_at_unix=1767225600,
    )


def playback_markers(prefix: str, *timestamps: float) -> List[Marker]:
    return [
        Marker(marker_id=f"{prefix}-{index}", timestamp_seconds=timestamp, kind=MarkerKind.KILL)
        for index, timestamp in enumerate(timestamps)
    ]
