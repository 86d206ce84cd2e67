"""Tests for key estimation."""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chord_engine.core import FeatureSet, NO_PITCH
from chord_engine.inference import KeyEstimator


# ============================================================================
# Test Fixtures - Helper functions to create test data
# ============================================================================

def chroma_of(pitch_classes, n_frames: int = 10) -> np.ndarray:
    """Equal-weight chroma frames over the given pitch classes."""
    row = np.zeros(12)
    row[list(pitch_classes)] = 1.0 / len(pitch_classes)
    return np.tile(row, (n_frames, 1))


def make_features(chroma: np.ndarray) -> FeatureSet:
    n = len(chroma)
    return FeatureSet(
        chroma=chroma,
        bass_pitch_class=np.full(n, NO_PITCH),
        frame_energy=np.ones(n),
        spectral_centroid=np.zeros(n),
        hop_length=2205,
        sample_rate=22050,
    )


class TestKeyEstimator:
    """Test Krumhansl-Schmuckler key estimation."""

    def test_c_major_triad(self):
        """A C major triad reads as C major, ahead of E minor."""
        key = KeyEstimator().estimate(make_features(chroma_of([0, 4, 7])))
        assert key.root == 0
        assert not key.is_minor
        assert key.name == "C major"
        assert key.score == pytest.approx((6.35 + 4.38 + 5.19) / 3)

    def test_a_minor_triad(self):
        key = KeyEstimator().estimate(make_features(chroma_of([9, 0, 4])))
        assert key.root == 9
        assert key.is_minor
        assert key.label == "Am"

    def test_transposed_triad(self):
        """Scores are transposition invariant."""
        key = KeyEstimator().estimate(make_features(chroma_of([7, 11, 2])))
        assert key.name == "G major"

    def test_silence_gives_default(self):
        """All-zero chroma falls back to C major with zero score."""
        key = KeyEstimator().estimate(make_features(np.zeros((5, 12))))
        assert key.root == 0
        assert not key.is_minor
        assert key.score == 0.0

    def test_empty_features_give_default(self):
        key = KeyEstimator().estimate(FeatureSet.empty(2205, 22050))
        assert key.name == "C major"
        assert key.score == 0.0

    def test_aggregate_is_normalized(self):
        chroma = chroma_of([0, 4, 7]) * 3.0
        dist = KeyEstimator().aggregate_chroma(make_features(chroma))
        assert dist.sum() == pytest.approx(1.0)

    def test_rank(self):
        """Ranking lists all 24 keys, best first."""
        features = make_features(chroma_of([0, 4, 7]))
        estimator = KeyEstimator()
        ranked = estimator.rank(features)
        assert len(ranked) == 24
        assert ranked[0].name == estimator.estimate(features).name
        assert ranked[1].name == "E minor"
        assert ranked[0].score > ranked[1].score
        scores = [c.score for c in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_temperley_profile(self):
        key = KeyEstimator(profile_type="temperley").estimate(make_features(chroma_of([0, 4, 7])))
        assert key.name == "C major"

    def test_unknown_profile_raises(self):
        with pytest.raises(ValueError, match="key profile"):
            KeyEstimator(profile_type="unknown")
