"""
Marker Layer
============

Ordered playback markers for one session.

Modules:
- index: OrderedMarkerIndex (sorted insert, bulk replace, filtering view)
- translation: event -> marker mapping
- actors: target-kind resolution for the non-player filter
"""

from .index import OrderedMarkerIndex
from .translation import (
    translate,
    translate_all,
    translate_important_event,
    timeline_markers_from_events,
    MARKER_KIND_BY_EVENT_KIND,
)
from .actors import resolve_target_kind, is_hidden_for_non_player_filter

__all__ = [
    'OrderedMarkerIndex',
    'translate',
    'translate_all',
    'translate_important_event',
    'timeline_markers_from_events',
    'MARKER_KIND_BY_EVENT_KIND',
    'resolve_target_kind',
    'is_hidden_for_non_player_filter',
]
