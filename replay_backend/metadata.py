"""
Recording Metadata Collaborator
===============================

Reads the JSON documents the capture side writes next to recordings and
turns them into inputs for the marker index and the segment reconstructor.

DOCUMENTS:
- <recording>.meta.json sidecar: recording summary and important events
  positioned in recording seconds (schema version 1, camelCase keys)
- Parsed combat log: total line count plus line-numbered event records

OUTCOMES:
=========
- Sidecar missing      -> Result.success(None)   (nothing recorded, not an error)
- Sidecar valid        -> Result.success(RecordingMetadata)
- Unreadable/malformed -> Result.failure(Error)  (a loading error)
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import asyncio
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .contracts.base import Error, ErrorCode, Result
from .contracts.events import LogEvent, parse_event_record
from .contracts.markers import Marker
from .markers.translation import translate_important_event

logger = logging.getLogger(__name__)

RECORDING_METADATA_SCHEMA_VERSION = 1
SIDECAR_SUFFIX = ".meta.json"

PathLike = Union[str, Path]


# =============================================================================
# SIDECAR MODELS
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class RecordingEncounterMetadata(_CamelModel):
    name: str
    category: str
    started_at_seconds: Optional[float] = Field(default=None, alias="startedAtSeconds")
    ended_at_seconds: Optional[float] = Field(default=None, alias="endedAtSeconds")


class RecordingImportantEventMetadata(_CamelModel):
    timestamp_seconds: float = Field(alias="timestampSeconds")
    event_type: str = Field(alias="eventType")
    log_timestamp: Optional[str] = Field(default=None, alias="logTimestamp")
    source: Optional[str] = None
    target: Optional[str] = None
    target_kind: Optional[str] = Field(default=None, alias="targetKind")
    zone_name: Optional[str] = Field(default=None, alias="zoneName")
    encounter_name: Optional[str] = Field(default=None, alias="encounterName")
    encounter_category: Optional[str] = Field(default=None, alias="encounterCategory")


class RecordingMetadata(_CamelModel):
    schema_version: int = Field(alias="schemaVersion")
    recording_file: str = Field(alias="recordingFile")
    zone_name: Optional[str] = Field(default=None, alias="zoneName")
    encounter_name: Optional[str] = Field(default=None, alias="encounterName")
    encounter_category: Optional[str] = Field(default=None, alias="encounterCategory")
    encounters: List[RecordingEncounterMetadata] = Field(default_factory=list)
    important_events: List[RecordingImportantEventMetadata] = Field(
        default_factory=list, alias="importantEvents"
    )
    important_event_counts: Dict[str, int] = Field(default_factory=dict, alias="importantEventCounts")
    important_events_dropped_count: int = Field(default=0, alias="importantEventsDroppedCount")
    captured_at_unix: int = Field(default=0, alias="capturedAtUnix")

    def to_markers(self) -> List[Marker]:
        """Playback markers for the qualifying important events."""
        markers = []
        for index, event in enumerate(self.important_events):
            marker = translate_important_event(event.model_dump(by_alias=True), index)
            if marker is not None:
                markers.append(marker)
        return markers

    def sorted_event_counts(self) -> List[Tuple[str, int]]:
        """Event counts, most frequent first."""
        return sorted(self.important_event_counts.items(), key=lambda item: item[1], reverse=True)


# =============================================================================
# PARSED COMBAT LOG
# =============================================================================

class ParsedCombatLog(_CamelModel):
    """Output of the external log parser for one file."""
    total_lines: int = Field(default=0, alias="totalLines", ge=0)
    parsed_events: List[dict] = Field(default_factory=list, alias="parsedEvents")
    event_counts: Dict[str, int] = Field(default_factory=dict, alias="eventCounts")
    file_path: Optional[str] = Field(default=None, alias="filePath")
    truncated: bool = False

    def typed_events(self) -> Tuple[List[LogEvent], int]:
        """
        Convert records to typed events, sorted by line.

        Returns (events, rejected_count).
        """
        events = []
        rejected = 0
        for record in self.parsed_events:
            event = parse_event_record(record)
            if event is None:
                rejected += 1
            else:
                events.append(event)
        events.sort(key=lambda event: event.line_number)
        return events, rejected


# =============================================================================
# FILE ACCESS
# =============================================================================

def metadata_sidecar_path(recording_path: PathLike) -> Path:
    """recording.mp4 -> recording.meta.json"""
    path = Path(recording_path)
    return path.with_name(path.stem + SIDECAR_SUFFIX)


def read_recording_metadata(recording_path: PathLike) -> Result:
    """Read the sidecar of a recording. See module docstring for outcomes."""
    sidecar = metadata_sidecar_path(recording_path)
    try:
        raw_json = sidecar.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Result.success(None)
    except OSError as exc:
        logger.warning("Failed to read recording metadata %s: %s", sidecar, exc)
        return Result.failure(Error.create(
            ErrorCode.METADATA_UNREADABLE,
            f"Failed to read recording metadata '{sidecar}': {exc}",
            path=str(sidecar),
        ))

    try:
        metadata = RecordingMetadata.model_validate_json(raw_json)
    except ValidationError as exc:
        logger.warning("Failed to parse recording metadata %s", sidecar)
        return Result.failure(Error.create(
            ErrorCode.METADATA_MALFORMED,
            f"Failed to parse recording metadata '{sidecar}': {exc.error_count()} error(s)",
            path=str(sidecar),
        ))

    if metadata.schema_version != RECORDING_METADATA_SCHEMA_VERSION:
        return Result.failure(Error.create(
            ErrorCode.UNSUPPORTED_SCHEMA_VERSION,
            f"Unsupported recording metadata schema version {metadata.schema_version}",
            path=str(sidecar),
        ))

    return Result.success(metadata)


def write_recording_metadata(recording_path: PathLike, metadata: RecordingMetadata) -> Path:
    """
    Write a sidecar atomically (temp file + replace).

    Used by capture-side tooling and fixtures.
    """
    sidecar = metadata_sidecar_path(recording_path)
    sidecar.parent.mkdir(parents=True, exist_ok=True)
    temp_path = sidecar.with_name(sidecar.name + ".tmp")
    temp_path.write_text(
        metadata.model_dump_json(by_alias=True, exclude_none=True, indent=2),
        encoding="utf-8",
    )
    temp_path.replace(sidecar)
    return sidecar


def load_parsed_log(path: PathLike) -> Result:
    """Load a parsed combat log document from JSON."""
    path = Path(path)
    try:
        raw_json = path.read_text(encoding="utf-8")
    except OSError as exc:
        return Result.failure(Error.create(
            ErrorCode.LOG_DOCUMENT_UNREADABLE,
            f"Failed to read parsed log '{path}': {exc}",
            path=str(path),
        ))
    try:
        return Result.success(ParsedCombatLog.model_validate_json(raw_json))
    except ValidationError as exc:
        return Result.failure(Error.create(
            ErrorCode.LOG_DOCUMENT_MALFORMED,
            f"Failed to parse log document '{path}': {exc.error_count()} error(s)",
            path=str(path),
        ))


# =============================================================================
# ASYNC FETCH (bulk-load source for PlaybackSession)
# =============================================================================

class MetadataLoadError(Exception):
    """A metadata fetch failed; carries the Error record."""

    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error


class RecordingMetadataFetcher:
    """
    Fetches playback markers for a recording identifier.

    Recording identifiers are file names resolved against recordings_dir.
    Usable directly as the fetch callable of PlaybackSession.load_recording.
    """

    def __init__(self, recordings_dir: PathLike):
        self._recordings_dir = Path(recordings_dir)

    def recording_path(self, recording_id: str) -> Path:
        return self._recordings_dir / Path(recording_id).name

    async def fetch_metadata(self, recording_id: str) -> Optional[RecordingMetadata]:
        result = await asyncio.to_thread(read_recording_metadata, self.recording_path(recording_id))
        if result.is_failure:
            raise MetadataLoadError(result.error)
        return result.value

    async def __call__(self, recording_id: str) -> Optional[List[Marker]]:
        metadata = await self.fetch_metadata(recording_id)
        if metadata is None:
            return None
        return metadata.to_markers()
