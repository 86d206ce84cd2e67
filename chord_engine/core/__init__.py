"""Core types and constants for Chord Engine."""

from .constants import (
    PITCH_NAMES,
    PITCH_NAMES_FLAT,
    MAJOR_SCALE,
    MINOR_SCALE,
    DEFAULT_SR,
    DEFAULT_TEMPO,
    NO_PITCH,
    ANALYSIS_MODES,
)
from .pitch import (
    to_pitch_class,
    pitch_name,
    interval_distance,
    parse_root,
    split_label,
    chord_intervals,
    in_key,
)
from .signal import Waveform, FrameFeatures, FeatureSet
from .timeline import (
    Key,
    KeyCandidate,
    ChordCandidate,
    ChordEvent,
    OrnamentType,
    Timeline,
)

__all__ = [
    # Constants
    "PITCH_NAMES",
    "PITCH_NAMES_FLAT",
    "MAJOR_SCALE",
    "MINOR_SCALE",
    "DEFAULT_SR",
    "DEFAULT_TEMPO",
    "NO_PITCH",
    "ANALYSIS_MODES",
    # Pitch helpers
    "to_pitch_class",
    "pitch_name",
    "interval_distance",
    "parse_root",
    "split_label",
    "chord_intervals",
    "in_key",
    # Signal types
    "Waveform",
    "FrameFeatures",
    "FeatureSet",
    # Harmony types
    "Key",
    "KeyCandidate",
    "ChordCandidate",
    "ChordEvent",
    "OrnamentType",
    "Timeline",
]
