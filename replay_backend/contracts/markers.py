"""
Marker Contracts

Point-in-time markers derived from a subset of log events.

- Marker: playback marker positioned in seconds (seek bar, game events strip)
- TimelineMarker: log-analysis marker positioned by line number
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import math

from .events import EventKind, LogTime, TargetKind


class MarkerKind(Enum):
    """Playback marker categories."""
    KILL = "kill"
    DEATH = "death"
    MANUAL = "manual"


@dataclass(frozen=True)
class Marker:
    """
    Immutable playback marker.

    INVARIANTS:
    - timestamp_seconds is finite and >= 0
    - marker_id is derived from kind + time + index and never reused
    """
    marker_id: str
    timestamp_seconds: float
    kind: MarkerKind
    source: Optional[str] = None
    target: Optional[str] = None
    target_kind: Optional[TargetKind] = None

    def __post_init__(self):
        if not math.isfinite(self.timestamp_seconds) or self.timestamp_seconds < 0:
            raise ValueError(
                f"Marker timestamp must be finite and >= 0, got {self.timestamp_seconds}"
            )

    @staticmethod
    def build_id(kind: MarkerKind, timestamp_seconds: float, index: int) -> str:
        return f"{kind.value}-{timestamp_seconds:.3f}-{index}"


@dataclass(frozen=True)
class TimelineMarker:
    """An important event placed on the log-analysis timeline by line."""
    marker_id: str
    line_number: int
    kind: EventKind
    log_time: LogTime
    source: Optional[str] = None
    target: Optional[str] = None
    target_kind: Optional[TargetKind] = None
