"""Refinement layer - Optional accuracy passes over a finalized timeline.

Passes run in order, each consuming the previous timeline:
- Quality refinement (sevenths, ninths, sus chords)
- Modal correction (minor/major on III, V, VII of minor keys)
- Inversion detection (slash basses)
- Ornament classification (passing, neighbor, pedal)
"""

from .base import RefinementPass, RefinementContext
from .quality import QualityRefiner
from .modal import ModalCorrector
from .inversion import InversionDetector
from .ornament import OrnamentClassifier

__all__ = [
    "RefinementPass",
    "RefinementContext",
    "QualityRefiner",
    "ModalCorrector",
    "InversionDetector",
    "OrnamentClassifier",
]
