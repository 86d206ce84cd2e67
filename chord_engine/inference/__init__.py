"""Inference layer - Harmonic understanding from frame features.

This layer turns per-frame chroma and bass into musical decisions:
- Key estimation (Krumhansl-Schmuckler or Temperley profiles)
- Chord templates (triads and extended qualities)
- Chord tracking (key-constrained Viterbi decoding)

Pipeline: FeatureSet → Key → Timeline
"""

from .key import KeyEstimator
from .templates import ChordTemplate, TRIAD_TEMPLATES, EXTENDED_TEMPLATES
from .tracker import ChordTracker, TrackerConfig

__all__ = [
    # Key estimation
    "KeyEstimator",
    # Templates
    "ChordTemplate",
    "TRIAD_TEMPLATES",
    "EXTENDED_TEMPLATES",
    # Chord tracking
    "ChordTracker",
    "TrackerConfig",
]
