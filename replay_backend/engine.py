"""
Analysis Engine

Unified entry point for the batch path: a complete parsed log goes in,
segments and timeline markers come out.

LAYER FLOW:
===========
1. Records: raw parser dicts -> typed LogEvents (bad records rejected)
2. Segments: LogEvents -> EncounterSegments (pure reconstruction)
3. Markers: LogEvents -> TimelineMarkers (important kinds, line order)

Everything is recomputed from the full record set on each call; no state
survives between analyses.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Any
import logging

from .contracts.events import LogEvent, parse_event_record
from .contracts.markers import Marker, TimelineMarker
from .contracts.segments import EncounterSegment
from .encounters.reconstruction import reconstruct_segments
from .markers.actors import is_hidden_for_non_player_filter
from .markers.translation import timeline_markers_from_events, translate_all
from .metadata import ParsedCombatLog

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Configuration for batch analysis."""
    hide_non_player: bool = False


@dataclass(frozen=True)
class TimelineAnalysis:
    """Immutable result of one analysis pass."""
    total_lines: int
    events: Tuple[LogEvent, ...]
    segments: Tuple[EncounterSegment, ...]
    timeline_markers: Tuple[TimelineMarker, ...]
    playback_markers: Tuple[Marker, ...]
    rejected_record_count: int

    @property
    def important_event_count(self) -> int:
        return len(self.timeline_markers)

    def event_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for event in self.events:
            counts[event.kind.value] = counts.get(event.kind.value, 0) + 1
        return counts


class TimelineBackend:
    """Orchestrates the batch analysis layers."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self._config = config or AnalysisConfig()

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def analyze(self, parsed_log: ParsedCombatLog) -> TimelineAnalysis:
        events, rejected = parsed_log.typed_events()
        return self.analyze_events(events, parsed_log.total_lines, rejected)

    def analyze_records(self, records: Iterable[Mapping[str, Any]], total_lines: int) -> TimelineAnalysis:
        events: List[LogEvent] = []
        rejected = 0
        for record in records:
            event = parse_event_record(record)
            if event is None:
                rejected += 1
            else:
                events.append(event)
        events.sort(key=lambda event: event.line_number)
        return self.analyze_events(events, total_lines, rejected)

    def analyze_events(
        self,
        events: List[LogEvent],
        total_lines: int,
        rejected_record_count: int = 0,
    ) -> TimelineAnalysis:
        segments = reconstruct_segments(events, total_lines)
        timeline_markers = timeline_markers_from_events(events)
        if self._config.hide_non_player:
            timeline_markers = [
                marker for marker in timeline_markers
                if not is_hidden_for_non_player_filter(marker.target, marker.target_kind)
            ]

        if rejected_record_count:
            logger.debug("Rejected %d malformed records", rejected_record_count)
        logger.info(
            "Analyzed %d events over %d lines: %d segments, %d timeline markers",
            len(events), total_lines, len(segments), len(timeline_markers),
        )

        return TimelineAnalysis(
            total_lines=total_lines,
            events=tuple(events),
            segments=tuple(segments),
            timeline_markers=tuple(timeline_markers),
            playback_markers=tuple(translate_all(events)),
            rejected_record_count=rejected_record_count,
        )
