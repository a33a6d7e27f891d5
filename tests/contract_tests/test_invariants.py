"""
Property Tests for Replay Contracts
Verifies the ordering, interval and projection invariants end to end over
arbitrary parser output, plus the constructor guards on each contract.
"""

import math

import pytest
from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from replay_backend.contracts.events import (
    CombatActionEvent, EncounterBoundaryEvent, EncounterCategory, EventKind, LogEvent,
)
from replay_backend.contracts.markers import Marker, MarkerKind
from replay_backend.contracts.segments import EncounterSegment, SegmentClosure
from replay_backend.engine import TimelineBackend
from replay_frontend.timeline import TimelineConfig, build_encounter_timeline

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

EVENT_TYPES = [kind.value for kind in EventKind] + ["SPELL_DAMAGE", None]


@composite
def parser_records(draw, line_number):
    """Generates parser records, including malformed ones."""
    record = {
        "lineNumber": line_number,
        "eventType": draw(st.sampled_from(EVENT_TYPES)),
        "logicalTime": draw(st.one_of(
            st.floats(),
            st.text(max_size=8),
            st.none(),
        )),
        "encounterName": draw(st.sampled_from(["Boss", "Adds", None])),
        "encounterCategory": draw(st.sampled_from(["raid", "mythicPlus", "pvp", "weird", None])),
    }
    target = draw(st.sampled_from([None, "Add", "Bob-Realm"]))
    if target is not None:
        record["target"] = target
        record["targetKind"] = draw(st.sampled_from([None, "PLAYER", "NPC", "pet"]))
    return record


@composite
def parsed_logs(draw):
    # A log never repeats a line number
    lines = draw(st.lists(
        st.one_of(st.integers(min_value=-2, max_value=300), st.none()), max_size=80, unique=True,
    ))
    records = [draw(parser_records(line)) for line in lines]
    total_lines = draw(st.integers(min_value=0, max_value=400))
    return records, total_lines


# =============================================================================
# PROPERTY TESTS
# =============================================================================

@settings(deadline=None)
@given(parsed_logs())
def test_pipeline_never_raises_on_parser_output(log):
    """Malformed records are rejected, never fatal."""
    records, total_lines = log
    analysis = TimelineBackend().analyze_records(records, total_lines)
    assert len(analysis.events) + analysis.rejected_record_count == len(records)


@settings(deadline=None)
@given(parsed_logs())
def test_segments_are_ordered_intervals(log):
    records, total_lines = log
    segments = TimelineBackend().analyze_records(records, total_lines).segments

    assert [s.start_line for s in segments] == sorted(s.start_line for s in segments)
    for segment in segments:
        assert segment.end_line >= segment.start_line
        assert (segment.end_time is None) == (segment.closure is SegmentClosure.OPEN_ENDED)


@settings(deadline=None)
@given(parsed_logs())
def test_playback_markers_have_usable_times(log):
    records, total_lines = log
    for marker in TimelineBackend().analyze_records(records, total_lines).playback_markers:
        assert math.isfinite(marker.timestamp_seconds)
        assert marker.timestamp_seconds >= 0


@settings(deadline=None)
@given(parsed_logs(), st.integers(min_value=0, max_value=10))
def test_buckets_partition_segment_members(log, cap):
    records, total_lines = log
    analysis = TimelineBackend().analyze_records(records, total_lines)
    view = build_encounter_timeline(
        analysis.segments, analysis.timeline_markers, total_lines, TimelineConfig(marker_cap=cap)
    )

    for encounter in view.encounters:
        members = [
            m for m in analysis.timeline_markers if encounter.segment.contains_line(m.line_number)
        ]
        assert encounter.bucket.total == len(members)
        assert len(encounter.bucket.visible) <= cap


@settings(deadline=None)
@given(parsed_logs())
def test_rendered_positions_stay_on_axis(log):
    records, total_lines = log
    analysis = TimelineBackend().analyze_records(records, total_lines)
    view = build_encounter_timeline(analysis.segments, analysis.timeline_markers, total_lines)

    for encounter in view.encounters:
        assert 0.0 <= encounter.bar.start_percent <= 100.0
        assert encounter.bar.end_percent <= 100.0 + 1e-9
        for positioned in encounter.markers:
            assert 0.0 <= positioned.position_percent <= 100.0


@settings(deadline=None)
@given(parsed_logs())
def test_analysis_is_deterministic(log):
    records, total_lines = log
    first = TimelineBackend().analyze_records(records, total_lines)
    second = TimelineBackend().analyze_records(records, total_lines)

    assert first.segments == second.segments
    assert first.timeline_markers == second.timeline_markers
    assert [m.marker_id for m in first.playback_markers] == [m.marker_id for m in second.playback_markers]


# =============================================================================
# CONSTRUCTOR GUARDS
# =============================================================================

@pytest.mark.parametrize("line", [0, -1, True, 1.5])
def test_event_requires_positive_int_line(line):
    with pytest.raises(ValueError):
        LogEvent(line_number=line, log_time=0.0, kind=EventKind.PARTY_KILL)


def test_event_family_must_match_kind():
    with pytest.raises(ValueError):
        CombatActionEvent(line_number=1, log_time=0.0, kind=EventKind.ENCOUNTER_START)
    with pytest.raises(ValueError):
        EncounterBoundaryEvent(line_number=1, log_time=0.0, kind=EventKind.UNIT_DIED)


@pytest.mark.parametrize("timestamp", [-0.1, math.nan, math.inf])
def test_marker_requires_usable_timestamp(timestamp):
    with pytest.raises(ValueError):
        Marker(marker_id="m", timestamp_seconds=timestamp, kind=MarkerKind.KILL)


def test_segment_cannot_end_before_start():
    with pytest.raises(ValueError):
        EncounterSegment(
            segment_id="s", name="Boss", category=EncounterCategory.RAID,
            start_line=5, end_line=4, start_time=0.0, end_time=1.0,
            closure=SegmentClosure.CLOSED,
        )


def test_only_open_ended_segments_lack_end_time():
    with pytest.raises(ValueError):
        EncounterSegment(
            segment_id="s", name="Boss", category=EncounterCategory.RAID,
            start_line=1, end_line=4, start_time=0.0, end_time=None,
            closure=SegmentClosure.CLOSED,
        )
    with pytest.raises(ValueError):
        EncounterSegment(
            segment_id="s", name="Boss", category=EncounterCategory.RAID,
            start_line=1, end_line=4, start_time=0.0, end_time=2.0,
            closure=SegmentClosure.OPEN_ENDED,
        )
