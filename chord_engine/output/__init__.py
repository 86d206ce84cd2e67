"""Output layer - Export chord timelines.

This layer handles exporting analyzed chords to:
- MIDI files (block chords)
- Lab files (start, end, label)
"""

from .midi import ChordMIDIExporter
from .lab import LabExporter

__all__ = [
    "ChordMIDIExporter",
    "LabExporter",
]
