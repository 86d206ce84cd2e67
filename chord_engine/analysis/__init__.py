"""Analysis layer - Low-level signal analysis.

This layer extracts features from raw audio:
- Radix-2 spectral transform
- Chroma, bass pitch class, frame energy, spectral centroid
- Tempo estimation
"""

from .fft import fft, magnitude_spectrum, next_power_of_two
from .features import FeatureExtractor, FeatureConfig, stabilize_bass
from .tempo import TempoAnalyzer, clamp_tempo, seconds_per_beat

__all__ = [
    "fft",
    "magnitude_spectrum",
    "next_power_of_two",
    "FeatureExtractor",
    "FeatureConfig",
    "stabilize_bass",
    "TempoAnalyzer",
    "clamp_tempo",
    "seconds_per_beat",
]
