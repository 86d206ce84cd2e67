"""Chord tracking - Viterbi decoding over diatonic triad states.

Each frame is scored against 14 triad hypotheses (major and minor on each
scale degree of the key); a dynamic program picks the best state path
under a fixed chord-change penalty and the path is collapsed into chord
events.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..core import (
    FeatureSet,
    Key,
    ChordCandidate,
    ChordEvent,
    Timeline,
    NO_PITCH,
    interval_distance,
)
from ..core.numeric import cosine_similarity, lower_percentile

logger = logging.getLogger(__name__)


@dataclass
class TrackerConfig:
    """Emission and transition weights for chord tracking.

    Attributes:
        bass_bonus: Added when the frame's bass equals the candidate root (default: 0.15)
        low_energy_penalty: Subtracted on quiet frames (default: 0.10)
        low_energy_percentile: Frames below this energy percentile are quiet (default: 30)
        change_penalty: Base cost of any chord change (default: 0.6)
        root_distance_penalty: Cost per semitone of root movement (default: 0.1)
        quality_change_penalty: Extra cost when major/minor quality flips (default: 0.05)
    """

    bass_bonus: float = 0.15
    low_energy_penalty: float = 0.10
    low_energy_percentile: float = 30.0
    change_penalty: float = 0.6
    root_distance_penalty: float = 0.1
    quality_change_penalty: float = 0.05


class ChordTracker:
    """Track chords frame by frame within a key."""

    def __init__(self, config: Optional[TrackerConfig] = None):
        """
        Initialize ChordTracker.

        Args:
            config: Optional TrackerConfig (defaults are used otherwise)
        """
        self.config = config or TrackerConfig()

    def build_candidates(self, key: Key) -> List[ChordCandidate]:
        """Major and minor triads on each scale degree, in scale order."""
        candidates = []
        for root in key.scale_pitch_classes:
            candidates.append(ChordCandidate(root, "major"))
            candidates.append(ChordCandidate(root, "minor"))
        return candidates

    def transition_penalty(self, a: ChordCandidate, b: ChordCandidate) -> float:
        """Cost of moving from candidate ``a`` to candidate ``b``."""
        if a.label == b.label:
            return 0.0
        penalty = (
            self.config.change_penalty
            + self.config.root_distance_penalty * interval_distance(a.root, b.root)
        )
        if a.quality != b.quality:
            penalty += self.config.quality_change_penalty
        return penalty

    def transition_matrix(self, candidates: List[ChordCandidate]) -> np.ndarray:
        """Penalty matrix [previous, current]."""
        n = len(candidates)
        matrix = np.zeros((n, n))
        for j, prev in enumerate(candidates):
            for s, cur in enumerate(candidates):
                matrix[j, s] = self.transition_penalty(prev, cur)
        return matrix

    def emission_scores(
        self, features: FeatureSet, candidates: List[ChordCandidate]
    ) -> np.ndarray:
        """
        Score every frame against every candidate.

        Returns:
            Emission matrix [n_frames, n_candidates]
        """
        masks = np.stack([c.mask for c in candidates])
        scores = cosine_similarity(features.chroma, masks)

        roots = np.array([c.root for c in candidates])
        bass = features.bass_pitch_class
        bass_match = (bass[:, None] != NO_PITCH) & (bass[:, None] == roots[None, :])
        scores = scores + self.config.bass_bonus * bass_match

        threshold = lower_percentile(features.frame_energy, self.config.low_energy_percentile)
        quiet = features.frame_energy < threshold
        scores[quiet] -= self.config.low_energy_penalty
        return scores

    def decode(self, emissions: np.ndarray, transitions: np.ndarray) -> np.ndarray:
        """
        Viterbi decode of the best state path.

        Backpointers live in a flat buffer addressed by
        ``frame * n_states + state``. Ties go to the lowest state index.

        Returns:
            State index per frame
        """
        n_frames, n_states = emissions.shape
        if n_frames == 0:
            return np.zeros(0, dtype=np.int64)

        backpointers = np.full(n_frames * n_states, -1, dtype=np.int64)
        score = emissions[0].copy()
        state_index = np.arange(n_states)

        for i in range(1, n_frames):
            # candidates[j, s]: arrive in s from j
            arrivals = score[:, None] - transitions
            best_prev = np.argmax(arrivals, axis=0)
            score = arrivals[best_prev, state_index] + emissions[i]
            backpointers[i * n_states:(i + 1) * n_states] = best_prev

        path = np.zeros(n_frames, dtype=np.int64)
        path[-1] = int(np.argmax(score))
        for i in range(n_frames - 1, 0, -1):
            path[i - 1] = backpointers[i * n_states + path[i]]
        return path

    def track(self, features: FeatureSet, key: Key) -> Timeline:
        """
        Produce a coarse chord timeline.

        Args:
            features: Frame features
            key: Detected key restricting the candidate roots

        Returns:
            Timeline with one event per run of identical states
        """
        if features.n_frames == 0:
            return Timeline()

        candidates = self.build_candidates(key)
        logger.debug("%d candidates in %s", len(candidates), key.name)

        emissions = self.emission_scores(features, candidates)
        path = self.decode(emissions, self.transition_matrix(candidates))

        events = []
        start = 0
        for i in range(1, len(path) + 1):
            if i == len(path) or path[i] != path[start]:
                events.append(ChordEvent(
                    time=features.frame_time(start),
                    label=candidates[path[start]].label,
                    frame_index=start,
                ))
                start = i

        timeline = Timeline.from_events(events)
        logger.debug("Tracked %d chord segments", len(timeline))
        return timeline
