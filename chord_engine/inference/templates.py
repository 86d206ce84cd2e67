"""Chord template bank.

Templates are data: intervals above the root with a weight per interval
(root highest, extensions progressively less). Dict order is the scoring
order, so the first template wins a tie.
"""

from typing import Dict, List, NamedTuple

import numpy as np

from ..core import to_pitch_class


class ChordTemplate(NamedTuple):
    """Interval/weight table for one chord quality."""
    intervals: List[int]
    weights: List[float]
    suffix: str  # Label suffix, e.g. "m7"

    def score(self, chroma: np.ndarray, root: int) -> float:
        """Weighted chroma energy at the template's chord tones."""
        return float(sum(
            chroma[to_pitch_class(root + interval)] * weight
            for interval, weight in zip(self.intervals, self.weights)
        ))


TRIAD_TEMPLATES: Dict[str, ChordTemplate] = {
    "major": ChordTemplate([0, 4, 7], [1.0, 0.9, 0.8], ""),
    "minor": ChordTemplate([0, 3, 7], [1.0, 0.9, 0.8], "m"),
    "dim": ChordTemplate([0, 3, 6], [1.0, 0.9, 0.8], "dim"),
    "aug": ChordTemplate([0, 4, 8], [1.0, 0.9, 0.8], "aug"),
    "sus2": ChordTemplate([0, 2, 7], [1.0, 0.85, 0.8], "sus2"),
    "sus4": ChordTemplate([0, 5, 7], [1.0, 0.85, 0.8], "sus4"),
}

EXTENDED_TEMPLATES: Dict[str, ChordTemplate] = {
    **TRIAD_TEMPLATES,
    # Seventh chords
    "maj7": ChordTemplate([0, 4, 7, 11], [1.0, 0.9, 0.8, 0.75], "maj7"),
    "dom7": ChordTemplate([0, 4, 7, 10], [1.0, 0.9, 0.8, 0.75], "7"),
    "m7": ChordTemplate([0, 3, 7, 10], [1.0, 0.9, 0.8, 0.75], "m7"),
    "dim7": ChordTemplate([0, 3, 6, 9], [1.0, 0.9, 0.8, 0.75], "dim7"),
    "m7b5": ChordTemplate([0, 3, 6, 10], [1.0, 0.9, 0.8, 0.75], "m7b5"),
    # Ninth chords (14 = 2 + 12)
    "dom9": ChordTemplate([0, 4, 7, 10, 14], [1.0, 0.9, 0.8, 0.7, 0.6], "9"),
    "maj9": ChordTemplate([0, 4, 7, 11, 14], [1.0, 0.9, 0.8, 0.7, 0.6], "maj9"),
    "m9": ChordTemplate([0, 3, 7, 10, 14], [1.0, 0.9, 0.8, 0.7, 0.6], "m9"),
}
