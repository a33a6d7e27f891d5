"""
Encounter Segment Reconstructor
===============================

Derives encounter intervals from the complete, line-ordered event list of
one log or recording.

INVARIANTS:
- Output is non-decreasing by start_line
- Segments sharing a key (name:category) never overlap
- end_line >= start_line for every segment
- Pure function: same events + same total_lines -> identical segments

FAILURE SEMANTICS:
==================
Never raises on malformed or partial boundary sequences. Logs are often
truncated mid-fight, so every unmatched boundary is absorbed into a
best-effort segment:
- START while the key is open: previous pull closes at (line - 1)
- END without START: synthetic single-line segment
- START never ended: closed at end-of-log, open-ended
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional
import logging

from ..contracts.events import (
    EventKind, LogEvent, LogTime, EncounterBoundaryEvent, EncounterCategory,
)
from ..contracts.segments import (
    EncounterSegment, SegmentClosure, UNKNOWN_ENCOUNTER_NAME, encounter_key,
)

logger = logging.getLogger(__name__)


@dataclass
class _OpenSegment:
    """Mutable working state for a segment whose END has not been seen."""
    key: str
    name: str
    category: EncounterCategory
    zone_name: Optional[str]
    start_line: int
    start_time: LogTime

    def close(self, end_line: int, end_time: Optional[LogTime], closure: SegmentClosure) -> EncounterSegment:
        return EncounterSegment(
            segment_id=f"{self.key}-{self.start_line}",
            name=self.name,
            category=self.category,
            zone_name=self.zone_name,
            start_line=self.start_line,
            end_line=max(self.start_line, end_line),
            start_time=self.start_time,
            end_time=end_time,
            closure=closure,
        )


class EncounterSegmentReconstructor:
    """
    Single-pass scanner over line-ordered events.

    One instance handles one pass; use reconstruct_segments() for the
    common case.
    """

    def __init__(self, total_lines: int):
        self._total_lines = total_lines
        self._open: Dict[str, _OpenSegment] = {}
        self._closed: List[EncounterSegment] = []

        # Exhaustive dispatch: every EventKind is classified here
        self._handlers: Dict[EventKind, Callable[[LogEvent], None]] = {
            EventKind.ENCOUNTER_START: self._on_start,
            EventKind.ENCOUNTER_END: self._on_end,
            EventKind.PARTY_KILL: self._ignore,
            EventKind.UNIT_DIED: self._ignore,
            EventKind.SPELL_INTERRUPT: self._ignore,
            EventKind.SPELL_DISPEL: self._ignore,
            EventKind.MANUAL_MARKER: self._ignore,
        }
        missing = set(EventKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"Unclassified event kinds: {sorted(k.value for k in missing)}")

    def feed(self, event: LogEvent) -> None:
        handler = self._handlers.get(getattr(event, "kind", None))
        if handler is not None:
            handler(event)

    def finish(self) -> List[EncounterSegment]:
        """Close every still-open segment at end-of-log and return all segments."""
        for open_segment in self._open.values():
            logger.debug(
                "Encounter %s never ended; closing at end of log (line %d)",
                open_segment.key, self._total_lines,
            )
            self._closed.append(open_segment.close(
                end_line=self._total_lines,
                end_time=None,
                closure=SegmentClosure.OPEN_ENDED,
            ))
        self._open = {}
        return sorted(self._closed, key=lambda segment: segment.start_line)

    # =========================================================================
    # HANDLERS
    # =========================================================================

    @staticmethod
    def _identity(event: EncounterBoundaryEvent):
        name = event.encounter_name or UNKNOWN_ENCOUNTER_NAME
        category = getattr(event, "encounter_category", EncounterCategory.UNKNOWN)
        return encounter_key(name, category), name, category

    def _on_start(self, event: LogEvent) -> None:
        key, name, category = self._identity(event)

        previous = self._open.pop(key, None)
        if previous is not None:
            # Missing END for an earlier pull of the same key
            self._closed.append(previous.close(
                end_line=event.line_number - 1,
                end_time=event.log_time,
                closure=SegmentClosure.CLOSED,
            ))

        self._open[key] = _OpenSegment(
            key=key,
            name=name,
            category=category,
            zone_name=event.zone_name,
            start_line=event.line_number,
            start_time=event.log_time,
        )

    def _on_end(self, event: LogEvent) -> None:
        key, name, category = self._identity(event)

        current = self._open.pop(key, None)
        if current is not None:
            if not current.zone_name and event.zone_name:
                current.zone_name = event.zone_name
            self._closed.append(current.close(
                end_line=event.line_number,
                end_time=event.log_time,
                closure=SegmentClosure.CLOSED,
            ))
            return

        logger.debug("ENCOUNTER_END for %s at line %d has no START", key, event.line_number)
        self._closed.append(EncounterSegment(
            segment_id=f"{key}-{event.line_number}",
            name=name,
            category=category,
            zone_name=event.zone_name,
            start_line=event.line_number,
            end_line=event.line_number,
            start_time=event.log_time,
            end_time=event.log_time,
            closure=SegmentClosure.SYNTHETIC_FROM_UNMATCHED_END,
        ))

    def _ignore(self, event: LogEvent) -> None:
        pass


def reconstruct_segments(events: Iterable[LogEvent], total_lines: int) -> List[EncounterSegment]:
    """
    Reconstruct encounter segments from a complete event list.

    Args:
        events: Events in line order
        total_lines: Line count of the whole log (end-of-log for open segments)
    """
    reconstructor = EncounterSegmentReconstructor(total_lines)
    for event in events:
        reconstructor.feed(event)
    return reconstructor.finish()
