"""
Encounter Replay Timeline: API Server
=====================================

Read-oriented API surfacing derived timelines to the playback UI.

Endpoints:
- GET  /health                                   -> service status
- POST /api/v1/analysis                          -> segments, buckets, bars for a parsed log
- GET  /api/v1/recordings/{recording_file}/markers -> playback markers from a sidecar

Usage:
    uvicorn replay_backend.api.server:app --reload
"""
from __future__ import annotations
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from ..contracts.base import ErrorCode
from ..engine import AnalysisConfig, TimelineBackend
from ..metadata import (
    MetadataLoadError, ParsedCombatLog, RecordingMetadataFetcher,
)
from .mapper import map_analysis, map_playback_track
from replay_frontend.bucketing import MAX_MARKERS_PER_SEGMENT
from replay_frontend.timeline import (
    TimelineConfig, build_encounter_timeline, build_playback_track,
)

logger = logging.getLogger(__name__)

RECORDINGS_DIR_ENV = "REPLAY_RECORDINGS_DIR"


@dataclass
class ServerConfig:
    """Configuration for the API server."""
    recordings_dir: str = "recordings"

    @staticmethod
    def from_env() -> ServerConfig:
        return ServerConfig(
            recordings_dir=os.environ.get(RECORDINGS_DIR_ENV, os.path.join(os.getcwd(), "recordings"))
        )


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve configuration and collaborators on startup."""
    config = ServerConfig.from_env()
    logger.info("Serving recordings from %s", config.recordings_dir)
    app.state.config = config
    app.state.fetcher = RecordingMetadataFetcher(config.recordings_dir)
    yield
    logger.info("Shutting down timeline API")
    app.state.fetcher = None


app = FastAPI(
    title="Encounter Replay Timeline API",
    version="0.1.0",
    description="Derived encounter segments and marker timelines for playback",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def _fetcher(request: Request) -> RecordingMetadataFetcher:
    fetcher = getattr(request.app.state, "fetcher", None)
    if fetcher is None:
        raise HTTPException(status_code=503, detail="Metadata collaborator not initialized")
    return fetcher


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check(request: Request):
    """System status."""
    _fetcher(request)
    return {"status": "online"}


@app.post("/api/v1/analysis")
async def analyze_log(
    parsed_log: ParsedCombatLog,
    cap: int = Query(MAX_MARKERS_PER_SEGMENT, ge=0),
    hide_non_player: bool = False,
):
    """
    Reconstruct segments and bucket markers for a complete parsed log.
    Empty segment lists are a normal result, not an error.
    """
    backend = TimelineBackend(AnalysisConfig(hide_non_player=hide_non_player))
    analysis = backend.analyze(parsed_log)
    view = build_encounter_timeline(
        analysis.segments,
        analysis.timeline_markers,
        analysis.total_lines,
        TimelineConfig(marker_cap=cap),
    )
    return map_analysis(analysis, view)


@app.get("/api/v1/recordings/{recording_file}/markers")
async def get_recording_markers(
    request: Request,
    recording_file: str,
    duration: Optional[float] = Query(None, ge=0),
    hide_non_player: bool = False,
):
    """
    Playback markers for a recording, read from its metadata sidecar.

    404 when the recording has no sidecar, 422 when it cannot be parsed.
    """
    fetcher = _fetcher(request)
    try:
        metadata = await fetcher.fetch_metadata(recording_file)
    except MetadataLoadError as exc:
        status = 500 if exc.error.code is ErrorCode.METADATA_UNREADABLE else 422
        raise HTTPException(status_code=status, detail=exc.error.message)

    if metadata is None:
        raise HTTPException(status_code=404, detail=f"No metadata for {recording_file}")

    track = build_playback_track(metadata.to_markers(), duration, hide_non_player)
    return {
        "recordingFile": metadata.recording_file,
        "zoneName": metadata.zone_name,
        "encounterName": metadata.encounter_name,
        "encounterCategory": metadata.encounter_category,
        "eventCounts": [
            {"eventType": event_type, "count": count}
            for event_type, count in metadata.sorted_event_counts()
        ],
        "droppedEventCount": metadata.important_events_dropped_count,
        "track": map_playback_track(track),
    }
