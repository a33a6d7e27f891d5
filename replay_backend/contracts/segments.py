"""
Encounter Segment Contracts

Reconstructed encounter intervals over log line numbers.

CLOSURE VARIANTS:
=================
Every segment states how it was closed instead of relying on a missing
end time:
- CLOSED: matched START/END, or closed by a restart of the same key
- OPEN_ENDED: END never observed, closed at end-of-log (no end_time)
- SYNTHETIC_FROM_UNMATCHED_END: END without START, covers only its own line
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .events import EncounterCategory, LogTime

UNKNOWN_ENCOUNTER_NAME = "Unknown Encounter"


class SegmentClosure(Enum):
    CLOSED = "closed"
    OPEN_ENDED = "open_ended"
    SYNTHETIC_FROM_UNMATCHED_END = "synthetic_from_unmatched_end"


def encounter_key(name: Optional[str], category: EncounterCategory) -> str:
    """Segment identity used to pair START/END records: name:category."""
    return f"{name or UNKNOWN_ENCOUNTER_NAME}:{category.value}"


@dataclass(frozen=True)
class EncounterSegment:
    """
    Immutable encounter interval.

    INVARIANTS:
    - end_line >= start_line
    - end_time is None exactly when closure is OPEN_ENDED
    """
    segment_id: str
    name: str
    category: EncounterCategory
    start_line: int
    end_line: int
    start_time: LogTime
    closure: SegmentClosure
    end_time: Optional[LogTime] = None
    zone_name: Optional[str] = None

    def __post_init__(self):
        if self.end_line < self.start_line:
            raise ValueError(
                f"Segment {self.segment_id} ends before it starts "
                f"({self.end_line} < {self.start_line})"
            )
        if (self.end_time is None) != (self.closure is SegmentClosure.OPEN_ENDED):
            raise ValueError(
                f"Segment {self.segment_id}: end_time must be absent only for open-ended segments"
            )

    @property
    def key(self) -> str:
        return encounter_key(self.name, self.category)

    @property
    def is_open(self) -> bool:
        return self.closure is SegmentClosure.OPEN_ENDED

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def contains_line(self, line_number: int) -> bool:
        return self.start_line <= line_number <= self.end_line
