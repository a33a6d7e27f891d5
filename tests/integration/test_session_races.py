"""
Playback Session Tests

The session is the single writer of its marker index. These tests pin
down the mode switches and the stale bulk-load race: a slow metadata
fetch for recording A must never overwrite recording B.
"""

import asyncio

import pytest

from replay_backend.contracts.base import Error, ErrorCode
from replay_backend.contracts.events import CombatActionEvent, EventKind
from replay_backend.metadata import MetadataLoadError
from replay_backend.session import PlaybackSession, SessionMode

from tests.integration.fixtures import playback_markers


MARKERS_A = playback_markers("a", 30.0, 10.0)
MARKERS_B = playback_markers("b", 5.0, 50.0, 25.0)


def _kill(line, seconds):
    return CombatActionEvent(line_number=line, log_time=seconds, kind=EventKind.PARTY_KILL)


class TestLiveIngestion:

    def test_ingest_keeps_order(self):
        session = PlaybackSession()
        session.start_live("live-1")
        for line, seconds in ((1, 10.0), (2, 30.0), (3, 20.0)):
            session.ingest(_kill(line, seconds))

        assert [m.timestamp_seconds for m in session.index.markers] == [10.0, 20.0, 30.0]

    def test_non_qualifying_events_return_none(self):
        session = PlaybackSession()
        session.start_live("live-1")
        event = CombatActionEvent(line_number=1, log_time=1.0, kind=EventKind.SPELL_DISPEL)

        assert session.ingest(event) is None
        assert len(session.index) == 0

    def test_ingest_outside_live_session_is_ignored(self):
        session = PlaybackSession()
        session.open_recording("a.mp4")

        assert session.ingest(_kill(1, 1.0)) is None
        assert len(session.index) == 0

    def test_start_live_clears_previous_markers(self):
        session = PlaybackSession()
        session.start_live("live-1")
        session.ingest(_kill(1, 1.0))
        session.start_live("live-2")

        assert session.mode is SessionMode.LIVE
        assert len(session.index) == 0


class TestBulkLoad:

    def test_apply_current_ticket(self):
        session = PlaybackSession()
        ticket = session.open_recording("a.mp4")

        assert session.apply_bulk_load(ticket, MARKERS_A)
        assert [m.marker_id for m in session.index.markers] == ["a-1", "a-0"]

    def test_none_result_applies_as_empty(self):
        session = PlaybackSession()
        ticket = session.open_recording("a.mp4")

        assert session.apply_bulk_load(ticket, None)
        assert len(session.index) == 0

    def test_stale_ticket_is_dropped(self):
        session = PlaybackSession()
        ticket_a = session.open_recording("a.mp4")
        ticket_b = session.open_recording("b.mp4")
        session.apply_bulk_load(ticket_b, MARKERS_B)

        assert not session.apply_bulk_load(ticket_a, MARKERS_A)
        assert {m.marker_id for m in session.index.markers} == {"b-0", "b-1", "b-2"}

    def test_reopening_same_recording_invalidates_old_ticket(self):
        session = PlaybackSession()
        first = session.open_recording("a.mp4")
        second = session.open_recording("a.mp4")

        assert not session.is_current(first)
        assert session.is_current(second)

    def test_ticket_invalid_after_switch_to_live(self):
        session = PlaybackSession()
        ticket = session.open_recording("a.mp4")
        session.start_live("live-1")

        assert not session.apply_bulk_load(ticket, MARKERS_A)
        assert session.mode is SessionMode.LIVE

    def test_close(self):
        session = PlaybackSession()
        ticket = session.open_recording("a.mp4")
        session.apply_bulk_load(ticket, MARKERS_A)
        session.close()

        assert session.mode is SessionMode.IDLE
        assert session.session_id is None
        assert len(session.index) == 0


class TestAsyncLoadRace:

    def test_late_result_for_previous_recording_is_dropped(self):
        async def scenario():
            session = PlaybackSession()
            release_a = asyncio.Event()

            async def fetch(recording_id):
                if recording_id == "a.mp4":
                    await release_a.wait()
                    return MARKERS_A
                return MARKERS_B

            task_a = asyncio.create_task(session.load_recording("a.mp4", fetch))
            await asyncio.sleep(0)
            loaded_b = await session.load_recording("b.mp4", fetch)
            release_a.set()
            loaded_a = await task_a
            return session, loaded_a, loaded_b

        session, loaded_a, loaded_b = asyncio.run(scenario())

        assert loaded_b is True
        assert loaded_a is False
        assert session.session_id == "b.mp4"
        assert [m.timestamp_seconds for m in session.index.markers] == [5.0, 25.0, 50.0]

    def test_failed_fetch_for_current_recording_propagates(self):
        async def fetch(recording_id):
            raise MetadataLoadError(Error.create(ErrorCode.METADATA_MALFORMED, "bad sidecar"))

        session = PlaybackSession()
        with pytest.raises(MetadataLoadError):
            asyncio.run(session.load_recording("a.mp4", fetch))

    def test_failed_fetch_for_stale_recording_is_dropped(self):
        async def scenario():
            session = PlaybackSession()
            release_a = asyncio.Event()

            async def fetch(recording_id):
                if recording_id == "a.mp4":
                    await release_a.wait()
                    raise MetadataLoadError(Error.create(ErrorCode.METADATA_UNREADABLE, "gone"))
                return MARKERS_B

            task_a = asyncio.create_task(session.load_recording("a.mp4", fetch))
            await asyncio.sleep(0)
            await session.load_recording("b.mp4", fetch)
            release_a.set()
            return session, await task_a

        session, loaded_a = asyncio.run(scenario())

        assert loaded_a is False
        assert len(session.index) == 3
