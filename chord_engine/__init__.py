"""Chord Engine - Audio to Chord Timeline Analysis.

Architecture Layers:
    1. input/       - Audio loading and preprocessing
    2. analysis/    - Low-level signal analysis (FFT, features, tempo)
    3. inference/   - Musical understanding (key, chord templates, tracking)
    4. processing/  - Timeline finalization (short-chord removal, beat snapping)
    5. refinement/  - Accuracy passes (quality, modal, inversion, ornament)
    6. output/      - Export (MIDI, lab)
"""

__version__ = "0.3.0"

# Core types
from .core import Waveform, FeatureSet, Key, ChordEvent, OrnamentType, Timeline

# Input layer
from .input import AudioLoader

# Analysis layer
from .analysis import FeatureExtractor, FeatureConfig, TempoAnalyzer

# Inference layer
from .inference import KeyEstimator, ChordTracker, TrackerConfig

# Processing layer
from .processing import TimelineFinalizer, FinalizerConfig

# Refinement layer
from .refinement import (
    QualityRefiner,
    ModalCorrector,
    InversionDetector,
    OrnamentClassifier,
)

# Pipeline
from .pipeline import AnalysisConfig, AnalysisResult, ChordPipeline, analyze

# Output layer
from .output import ChordMIDIExporter, LabExporter

__all__ = [
    # Core
    "Waveform",
    "FeatureSet",
    "Key",
    "ChordEvent",
    "OrnamentType",
    "Timeline",
    # Input
    "AudioLoader",
    # Analysis
    "FeatureExtractor",
    "FeatureConfig",
    "TempoAnalyzer",
    # Inference
    "KeyEstimator",
    "ChordTracker",
    "TrackerConfig",
    # Processing
    "TimelineFinalizer",
    "FinalizerConfig",
    # Refinement
    "QualityRefiner",
    "ModalCorrector",
    "InversionDetector",
    "OrnamentClassifier",
    # Pipeline
    "AnalysisConfig",
    "AnalysisResult",
    "ChordPipeline",
    "analyze",
    # Output
    "ChordMIDIExporter",
    "LabExporter",
]
