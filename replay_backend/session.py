"""
Playback Session
================

Owns the marker index for one playback surface and enforces the
single-writer discipline between live ingestion and bulk loads.

RULES:
- Starting a live session clears the index; bulk loads are then refused
- Opening a recording clears the index; live ingestion is then refused
- Every bulk load carries a ticket naming the session it was requested for
- A ticket issued before the latest session switch is stale and dropped

The stale-ticket check is what keeps an asynchronous metadata fetch for
recording A, resolving after recording B was opened, from overwriting B.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, Optional
import logging

from .contracts.events import LogEvent
from .contracts.markers import Marker
from .markers.index import OrderedMarkerIndex
from .markers.translation import translate

logger = logging.getLogger(__name__)


class SessionMode(Enum):
    IDLE = "idle"
    LIVE = "live"
    RECORDED = "recorded"


@dataclass(frozen=True)
class BulkLoadTicket:
    """Identity tag for one bulk load request."""
    session_id: str
    generation: int


MarkerFetch = Callable[[str], Awaitable[Optional[Iterable[Marker]]]]


class PlaybackSession:
    """
    Scoped owner of the marker index.

    Components that need the markers receive this handle (or the index
    snapshot); there is no ambient global marker state.
    """

    def __init__(self, index: Optional[OrderedMarkerIndex] = None):
        self._index = index if index is not None else OrderedMarkerIndex()
        self._mode = SessionMode.IDLE
        self._session_id: Optional[str] = None
        self._generation = 0

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def index(self) -> OrderedMarkerIndex:
        return self._index

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, ticket: BulkLoadTicket) -> bool:
        return (
            self._mode is SessionMode.RECORDED
            and ticket.session_id == self._session_id
            and ticket.generation == self._generation
        )

    def _switch(self, session_id: Optional[str], mode: SessionMode) -> None:
        self._index.clear()
        self._generation += 1
        self._session_id = session_id
        self._mode = mode

    # =========================================================================
    # LIVE INGESTION
    # =========================================================================

    def start_live(self, session_id: str) -> None:
        """Begin a live session. Invalidates any in-flight bulk load."""
        self._switch(session_id, SessionMode.LIVE)
        logger.info("Started live session %s (generation %d)", session_id, self._generation)

    def ingest(self, event: LogEvent) -> Optional[Marker]:
        """
        Translate and insert one live event.

        Returns the inserted marker, or None when the event does not
        qualify or no live session is active.
        """
        if self._mode is not SessionMode.LIVE:
            logger.debug("Ignoring live event at line %d outside a live session", event.line_number)
            return None
        marker = translate(event)
        if marker is not None:
            self._index.insert(marker)
        return marker

    # =========================================================================
    # BULK LOAD
    # =========================================================================

    def open_recording(self, recording_id: str) -> BulkLoadTicket:
        """Switch to a recorded session and issue the ticket for its bulk load."""
        self._switch(recording_id, SessionMode.RECORDED)
        logger.info("Opened recording %s (generation %d)", recording_id, self._generation)
        return BulkLoadTicket(session_id=recording_id, generation=self._generation)

    def apply_bulk_load(self, ticket: BulkLoadTicket, markers: Optional[Iterable[Marker]]) -> bool:
        """
        Replace the marker set if the ticket is still current.

        A None result (nothing recorded) applies as an empty set.
        Returns False when the ticket is stale and the result was dropped.
        """
        if not self.is_current(ticket):
            logger.warning(
                "Dropping stale bulk load for %s (generation %d, current %s/%d)",
                ticket.session_id, ticket.generation, self._session_id, self._generation,
            )
            return False
        self._index.replace_all(markers or ())
        logger.info("Loaded %d markers for %s", len(self._index), ticket.session_id)
        return True

    async def load_recording(self, recording_id: str, fetch: MarkerFetch) -> bool:
        """
        Open a recording and apply its asynchronously fetched markers.

        Exceptions from fetch propagate to the caller while the recording is
        still current (a failed fetch is a loading error, distinct from an
        empty marker set). Returns False if another session was opened while
        the fetch was in flight; a late failure for a stale ticket is dropped
        the same way a late success is.
        """
        ticket = self.open_recording(recording_id)
        try:
            markers = await fetch(recording_id)
        except Exception:
            if self.is_current(ticket):
                raise
            logger.warning("Ignoring failed fetch for stale recording %s", recording_id)
            return False
        return self.apply_bulk_load(ticket, markers)

    def close(self) -> None:
        self._switch(None, SessionMode.IDLE)
