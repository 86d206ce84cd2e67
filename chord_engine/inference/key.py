"""Key estimation - Identify the tonal center of a recording.

Correlates the clip-wide chroma distribution against rotated major/minor
key profiles:
- Krumhansl-Schmuckler key profiles (default)
- Temperley key profiles (alternative weighting)
"""

import logging
from typing import List

import numpy as np

from ..core import FeatureSet, Key, KeyCandidate

logger = logging.getLogger(__name__)


class KeyEstimator:
    """Estimate the key of a feature set.

    Candidates are enumerated root ascending, major before minor; only a
    strictly greater score replaces the current best, so the first
    enumerated candidate wins ties.
    """

    # Krumhansl-Schmuckler key profiles (cognitive-based)
    KRUMHANSL_MAJOR = np.array(
        [6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88]
    )
    KRUMHANSL_MINOR = np.array(
        [6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17]
    )

    # Temperley key profiles (corpus-based, often more accurate for pop/rock)
    TEMPERLEY_MAJOR = np.array(
        [5.0, 2.0, 3.5, 2.0, 4.5, 4.0, 2.0, 4.5, 2.0, 3.5, 1.5, 4.0]
    )
    TEMPERLEY_MINOR = np.array(
        [5.0, 2.0, 3.5, 4.5, 2.0, 4.0, 2.0, 4.5, 3.5, 2.0, 1.5, 4.0]
    )

    PROFILE_TYPES = ("krumhansl", "temperley")

    def __init__(self, profile_type: str = "krumhansl"):
        """
        Initialize KeyEstimator.

        Args:
            profile_type: Key profile algorithm ("krumhansl" or "temperley")
        """
        if profile_type not in self.PROFILE_TYPES:
            raise ValueError(
                f"Unknown key profile '{profile_type}'. Valid: {', '.join(self.PROFILE_TYPES)}"
            )
        self.profile_type = profile_type

        if profile_type == "temperley":
            self.major_profile = self.TEMPERLEY_MAJOR
            self.minor_profile = self.TEMPERLEY_MINOR
        else:
            self.major_profile = self.KRUMHANSL_MAJOR
            self.minor_profile = self.KRUMHANSL_MINOR

    def aggregate_chroma(self, features: FeatureSet) -> np.ndarray:
        """
        Sum chroma over all frames and L1-normalize.

        Returns:
            12-element distribution (all zero for silent or empty input)
        """
        if features.n_frames == 0:
            return np.zeros(12)
        total = features.chroma.sum(axis=0)
        mass = total.sum()
        if mass > 0:
            total = total / mass
        return total

    def score(self, distribution: np.ndarray, root: int, is_minor: bool) -> float:
        """Dot product of the distribution with the profile rotated to ``root``."""
        profile = self.minor_profile if is_minor else self.major_profile
        # profile[i] weights scale degree i, which sits at pitch class root + i
        rotated = np.roll(distribution, -root)
        return float(np.dot(rotated, profile))

    def candidates(self, features: FeatureSet) -> List[KeyCandidate]:
        """All 24 keys in enumeration order with their scores."""
        distribution = self.aggregate_chroma(features)
        result = []
        for root in range(12):
            result.append(KeyCandidate(root, False, self.score(distribution, root, False)))
            result.append(KeyCandidate(root, True, self.score(distribution, root, True)))
        return result

    def rank(self, features: FeatureSet) -> List[KeyCandidate]:
        """All 24 keys sorted best first (stable, so ties keep enumeration order)."""
        return sorted(self.candidates(features), key=lambda c: c.score, reverse=True)

    def estimate(self, features: FeatureSet) -> Key:
        """
        Estimate the key.

        Returns:
            Best Key; C major with zero score for silent or empty input
        """
        best = KeyCandidate(0, False, 0.0)
        best_score = -1.0
        for candidate in self.candidates(features):
            if candidate.score > best_score:
                best_score = candidate.score
                best = candidate

        key = best.to_key()
        logger.info("Key: %s (score: %.3f)", key.name, key.score)
        return key
