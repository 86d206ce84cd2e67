"""Inversion detection - Add slash basses when a chord tone other than the root is in the bass."""

import logging

import numpy as np

from ..core import Timeline, parse_root, pitch_name, chord_intervals, to_pitch_class
from .base import RefinementPass, RefinementContext

logger = logging.getLogger(__name__)


class InversionDetector(RefinementPass):
    """Append "/bass" to chords played over a stable non-root chord tone."""

    name = "inversion"

    def __init__(
        self,
        confidence_floor: float = 0.10,
        bass_multiplier: float = 1.2,
        radius: int = 2,
        min_stable: int = 3,
    ):
        """
        Initialize InversionDetector.

        Args:
            confidence_floor: Base chroma energy required at the bass pitch class
            bass_multiplier: Bass emphasis; the floor is divided by
                max(1, 0.9 * bass_multiplier)
            radius: Frames checked on each side of the chord onset
            min_stable: Frames in the neighbourhood that must carry the same bass
        """
        self.confidence_floor = confidence_floor
        self.bass_multiplier = bass_multiplier
        self.radius = radius
        self.min_stable = min_stable

    @property
    def effective_floor(self) -> float:
        return self.confidence_floor / max(1.0, self.bass_multiplier * 0.9)

    def refine(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        features = context.features
        events = []

        for event in timeline:
            root = parse_root(event.label)
            intervals = chord_intervals(event.label)
            bass = features.bass_at(event.frame_index)
            if root is None or intervals is None or bass is None or bass == root or "/" in event.label:
                events.append(event)
                continue

            if to_pitch_class(bass - root) not in intervals:
                events.append(event)
                continue

            confidence = features.chroma[event.frame_index][bass]
            start = max(0, event.frame_index - self.radius)
            end = min(features.n_frames - 1, event.frame_index + self.radius)
            stable = int(np.sum(features.bass_pitch_class[start:end + 1] == bass))

            if confidence > self.effective_floor and stable >= self.min_stable:
                label = f"{event.label}/{pitch_name(bass)}"
                logger.debug("Inversion at %.2fs: %s", event.time, label)
                events.append(event.with_label(label))
            else:
                events.append(event)

        return Timeline(events=events)
