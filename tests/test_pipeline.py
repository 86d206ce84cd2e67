"""End-to-end tests for the chord analysis pipeline."""

import json

import pytest
import numpy as np
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from chord_engine import analyze, AnalysisConfig, ChordPipeline, Waveform
from chord_engine.core import OrnamentType, parse_root
from generate_test_audio import generate_chord_progression


SR = 22050


@pytest.fixture(scope="module")
def c_to_g():
    """Two seconds of C major then two seconds of G major."""
    return generate_chord_progression(["C", "G"], [2.0, 2.0], SR)


class TestEndToEnd:
    """Test full analysis of synthetic progressions."""

    def test_balanced(self, c_to_g):
        result = analyze(c_to_g, sample_rate=SR, tempo_hint=120)

        assert result.timeline.labels == ["C", "G"]
        assert result.timeline.times == pytest.approx([0.0, 2.0])
        assert result.key.name in ("C major", "G major")
        assert result.bpm == 120.0
        assert result.duration == pytest.approx(4.0)
        assert result.mode == "balanced"
        assert result.timeline.is_well_formed()

    def test_fast_matches_balanced(self, c_to_g):
        fast = analyze(c_to_g, sample_rate=SR, tempo_hint=120, mode="fast")
        balanced = analyze(c_to_g, sample_rate=SR, tempo_hint=120, mode="balanced")
        assert fast.timeline == balanced.timeline

    def test_accurate_keeps_roots(self, c_to_g):
        """Refinement may extend qualities but never moves roots or onsets."""
        result = analyze(c_to_g, sample_rate=SR, tempo_hint=120, mode="accurate")

        assert [parse_root(label) for label in result.timeline.labels] == [0, 7]
        assert result.timeline.times == pytest.approx([0.0, 2.0])
        assert all(isinstance(e.ornament_type, OrnamentType) for e in result.timeline)
        assert result.timeline.is_well_formed()

    def test_waveform_tempo_used(self, c_to_g):
        result = analyze(Waveform(samples=c_to_g, sample_rate=SR, tempo=90))
        assert result.bpm == 90.0

    def test_tempo_hint_clamped(self, c_to_g):
        result = analyze(c_to_g, sample_rate=SR, tempo_hint=400)
        assert result.bpm == 200.0

    def test_pop_progression(self):
        """I-vi-IV-V, two seconds per chord."""
        audio = generate_chord_progression(["C", "Am", "F", "G"], [2.0] * 4, SR)
        result = analyze(audio, sample_rate=SR, tempo_hint=120)
        assert result.timeline.labels == ["C", "Am", "F", "G"]
        assert result.timeline.times == pytest.approx([0.0, 2.0, 4.0, 6.0])
        assert result.key.name in ("C major", "A minor")

    def test_to_dict_is_json_ready(self, c_to_g):
        result = analyze(c_to_g, sample_rate=SR, tempo_hint=120)
        data = json.loads(json.dumps(result.to_dict()))
        assert data["bpm"] == 120.0
        assert data["mode"] == "balanced"
        assert [c["label"] for c in data["chords"]] == ["C", "G"]
        assert data["chords"][0]["ornament_type"] == "structural"


class TestDegenerateInput:
    """Degenerate audio degrades instead of failing."""

    def test_too_short(self):
        result = analyze(np.zeros(1000), sample_rate=SR)
        assert len(result.timeline) == 0
        assert result.key.name == "C major"
        assert result.key.score == 0.0
        assert result.bpm == 120.0

    def test_empty(self):
        result = analyze(np.zeros(0), sample_rate=SR)
        assert len(result.timeline) == 0

    def test_silence(self):
        result = analyze(np.zeros(2 * SR), sample_rate=SR, tempo_hint=120)
        assert result.key.name == "C major"
        assert result.key.score == 0.0
        assert result.timeline.is_well_formed()

    def test_silence_accurate(self):
        result = analyze(np.zeros(2 * SR), sample_rate=SR, tempo_hint=120, mode="accurate")
        assert result.timeline.is_well_formed()


class TestErrors:
    """Caller misuse raises ValueError."""

    def test_sample_rate_mismatch(self):
        wave = Waveform(samples=np.zeros(SR), sample_rate=SR)
        with pytest.raises(ValueError, match="does not match"):
            analyze(wave, sample_rate=44100)

    def test_matching_sample_rate_accepted(self):
        wave = Waveform(samples=np.zeros(1000), sample_rate=SR)
        assert analyze(wave, sample_rate=SR).mode == "balanced"

    def test_missing_sample_rate(self):
        with pytest.raises(ValueError, match="sample_rate"):
            analyze(np.zeros(SR))

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown mode"):
            analyze(np.zeros(SR), sample_rate=SR, mode="turbo")

    def test_stereo_rejected(self):
        with pytest.raises(ValueError):
            analyze(np.zeros((2, SR)), sample_rate=SR)


class TestChordPipeline:
    """Test pipeline composition."""

    def test_refinement_order(self):
        names = [p.name for p in ChordPipeline().refinement_passes()]
        assert names == ["quality", "modal", "inversion", "ornament"]

    def test_config_passed_through(self):
        pipeline = ChordPipeline(AnalysisConfig(key_profile="temperley", tempo_method="beat_track"))
        assert pipeline.key_estimator.profile_type == "temperley"
        assert pipeline.tempo_analyzer.method == "beat_track"

    def test_bad_key_profile(self):
        with pytest.raises(ValueError):
            ChordPipeline(AnalysisConfig(key_profile="bogus"))
