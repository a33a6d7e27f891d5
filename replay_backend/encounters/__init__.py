"""
Encounter Layer

Pure reconstruction of encounter segments from a full event list.
"""

from .reconstruction import EncounterSegmentReconstructor, reconstruct_segments

__all__ = [
    'EncounterSegmentReconstructor',
    'reconstruct_segments',
]
