"""
Display Projector
=================

Maps absolute positions (line numbers or seconds) onto a [0, 100] axis.

CONTRACT:
- percent = clamp(0, 100, (position - axis_start) / axis_span * 100)
- Zero, negative, missing or non-finite span -> 0.0, never NaN, never raises.
  Such an axis is "not yet renderable": callers must not show markers on it.
- Pure: identical arguments always give identical output
"""

from __future__ import annotations
from typing import Optional, Sequence
import math

import numpy as np

from replay_backend.contracts.segments import EncounterSegment
from .dtos import SegmentBar

LINE_AXIS_START = 1
SECONDS_AXIS_START = 0.0
DEFAULT_MIN_SEGMENT_WIDTH_PERCENT = 1.0


def is_renderable_axis(axis_span: Optional[float]) -> bool:
    return (
        axis_span is not None
        and not isinstance(axis_span, bool)
        and math.isfinite(axis_span)
        and axis_span > 0
    )


def project(position: float, axis_start: float, axis_span: Optional[float]) -> float:
    """Project one position onto the percentage axis."""
    if not is_renderable_axis(axis_span):
        return 0.0
    if position is None or not math.isfinite(position):
        return 0.0
    percent = (position - axis_start) / axis_span * 100.0
    return min(100.0, max(0.0, percent))


def project_line(line_number: float, total_lines: Optional[float]) -> float:
    """Line axis: line 1 sits at 0%."""
    return project(line_number, LINE_AXIS_START, total_lines)


def project_seconds(seconds: float, duration_seconds: Optional[float]) -> float:
    """Playback axis: 0 seconds sits at 0%."""
    return project(seconds, SECONDS_AXIS_START, duration_seconds)


def project_many(positions: Sequence[float], axis_start: float, axis_span: Optional[float]) -> np.ndarray:
    """Vectorised project(); same semantics element by element."""
    values = np.asarray(positions, dtype=float)
    if not is_renderable_axis(axis_span):
        return np.zeros(values.shape, dtype=float)
    with np.errstate(over="ignore", invalid="ignore"):
        percent = (values - axis_start) / float(axis_span) * 100.0
    # Non-finite positions project to 0, overflow clamps like project()
    percent = np.where(np.isfinite(values), percent, 0.0)
    return np.clip(percent, 0.0, 100.0)


def segment_bar(
    segment: EncounterSegment,
    total_lines: Optional[int],
    min_width_percent: float = DEFAULT_MIN_SEGMENT_WIDTH_PERCENT,
) -> SegmentBar:
    """
    Convert a segment's line range into a percentage bar.

    GUARANTEES:
    - width >= min_width_percent, even for single-line segments
    - start + width <= 100; when the minimum width would overflow, the
      start moves left instead of the bar shrinking
    """
    if not is_renderable_axis(total_lines):
        return SegmentBar(start_percent=0.0, width_percent=0.0, is_renderable=False)

    start = project_line(segment.start_line, total_lines)
    natural_width = segment.line_count / total_lines * 100.0
    width = max(min_width_percent, min(100.0 - start, natural_width))
    width = min(width, 100.0)
    if start + width > 100.0:
        start = max(0.0, 100.0 - width)
    return SegmentBar(start_percent=start, width_percent=width, is_renderable=True)
