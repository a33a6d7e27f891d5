"""
Replay Backend
==============

Derives playback structures from combat-log events.

INVARIANTS:
- Events are immutable; all derived structures are rebuilt from them
- Marker index is sorted by timestamp at every observable point
- Segment reconstruction never raises on partial boundary sequences

Modules:
- contracts: immutable events, markers, segments, errors
- markers: ordered marker index and event translation
- encounters: encounter segment reconstruction
- session: single-writer playback session with stale-load rejection
- metadata: recording sidecar and parsed-log documents
- engine: batch analysis orchestration
"""

from .engine import AnalysisConfig, TimelineAnalysis, TimelineBackend
from .session import PlaybackSession, SessionMode, BulkLoadTicket

__all__ = [
    'AnalysisConfig',
    'TimelineAnalysis',
    'TimelineBackend',
    'PlaybackSession',
    'SessionMode',
    'BulkLoadTicket',
]
