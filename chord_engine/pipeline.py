"""Chord analysis pipeline.

Stages:
    1. Feature extraction (chroma, bass, energy, centroid)
    2. Key estimation
    3. Chord tracking (Viterbi)
    4. Finalization (short-chord removal, beat snapping)
    5. Refinement passes ("accurate" mode only)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np

from .core import Waveform, Key, Timeline, ANALYSIS_MODES
from .analysis import FeatureExtractor, FeatureConfig, TempoAnalyzer, clamp_tempo
from .inference import KeyEstimator, ChordTracker, TrackerConfig
from .processing import TimelineFinalizer, FinalizerConfig
from .refinement import (
    RefinementPass,
    RefinementContext,
    QualityRefiner,
    ModalCorrector,
    InversionDetector,
    OrnamentClassifier,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Configuration for a full analysis run.

    Attributes:
        features: Frame feature extraction settings
        tracker: Chord tracking weights
        finalizer: Timeline finalization settings
        key_profile: "krumhansl" or "temperley" (default: krumhansl)
        tempo_method: "autocorrelation" or "beat_track" (default: autocorrelation)
        refine_radius: Frames averaged on each side of a chord in refinement (default: 2)
        modal_ratio: Major/minor third ratio needed for modal correction (default: 1.25)
        modal_floor: Minimum major-third energy for modal correction (default: 0.08)
        inversion_confidence: Bass chroma floor for inversions (default: 0.10)
        bass_multiplier: Bass emphasis used to scale the inversion floor (default: 1.2)
    """

    features: FeatureConfig = field(default_factory=FeatureConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    finalizer: FinalizerConfig = field(default_factory=FinalizerConfig)
    key_profile: str = "krumhansl"
    tempo_method: str = "autocorrelation"
    refine_radius: int = 2
    modal_ratio: float = 1.25
    modal_floor: float = 0.08
    inversion_confidence: float = 0.10
    bass_multiplier: float = 1.2


@dataclass
class AnalysisResult:
    """Output of a pipeline run."""

    timeline: Timeline
    key: Key
    bpm: float
    duration: float
    mode: str

    @property
    def labels(self) -> List[str]:
        return self.timeline.labels

    def to_dict(self) -> dict:
        """JSON-ready representation."""
        return {
            "key": self.key.name,
            "key_label": self.key.label,
            "key_score": round(self.key.score, 6),
            "bpm": self.bpm,
            "duration": round(self.duration, 6),
            "mode": self.mode,
            "chords": self.timeline.to_dicts(),
        }


class ChordPipeline:
    """Run the analysis stages over a waveform."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize ChordPipeline.

        Args:
            config: Optional AnalysisConfig (defaults are used otherwise)
        """
        self.config = config or AnalysisConfig()
        self.config.features.validate()

        self.feature_extractor = FeatureExtractor(self.config.features)
        self.tempo_analyzer = TempoAnalyzer(
            method=self.config.tempo_method,
            window_length=self.config.features.window_length,
            hop_seconds=self.config.features.hop_seconds,
        )
        self.key_estimator = KeyEstimator(self.config.key_profile)
        self.tracker = ChordTracker(self.config.tracker)
        self.finalizer = TimelineFinalizer(self.config.finalizer)

    def refinement_passes(self) -> List[RefinementPass]:
        """Refinement passes in the order they run."""
        radius = self.config.refine_radius
        return [
            QualityRefiner(radius=radius),
            ModalCorrector(
                ratio=self.config.modal_ratio,
                floor=self.config.modal_floor,
                radius=radius,
            ),
            InversionDetector(
                confidence_floor=self.config.inversion_confidence,
                bass_multiplier=self.config.bass_multiplier,
                radius=radius,
            ),
            OrnamentClassifier(),
        ]

    def run(
        self,
        waveform: Waveform,
        tempo_hint: Optional[float] = None,
        mode: str = "balanced",
    ) -> AnalysisResult:
        """
        Analyze a waveform.

        Args:
            waveform: Mono input signal
            tempo_hint: Known tempo in BPM; estimated from the audio when omitted
            mode: "fast", "balanced" or "accurate"

        Returns:
            AnalysisResult
        """
        if mode not in ANALYSIS_MODES:
            raise ValueError(f"Unknown mode '{mode}'. Valid: {', '.join(ANALYSIS_MODES)}")

        logger.info(
            "Analyzing %.2fs of audio at %d Hz (%s mode)",
            waveform.duration, waveform.sample_rate, mode,
        )

        # Stage 1: Features
        features = self.feature_extractor.extract(waveform)
        logger.info("Extracted %d frames", features.n_frames)

        # Tempo
        hint = tempo_hint if tempo_hint is not None else waveform.tempo
        if hint is not None:
            bpm = clamp_tempo(hint)
        else:
            bpm = self.tempo_analyzer.estimate(waveform)
        logger.info("Tempo: %.0f BPM", bpm)

        # Stage 2: Key
        key = self.key_estimator.estimate(features)

        # Stage 3: Chord tracking
        timeline = self.tracker.track(features, key)
        logger.info("Tracked %d chord changes", len(timeline))

        # Stage 4: Finalization
        timeline = self.finalizer.finalize(timeline, key, bpm, features)

        # Stage 5: Refinement
        if mode == "accurate":
            context = RefinementContext(features=features, key=key, bpm=bpm)
            for refinement in self.refinement_passes():
                timeline = refinement.apply(timeline, context)
                logger.debug("After %s pass: %s", refinement.name, " ".join(timeline.labels))

        logger.info("Final timeline: %d chords", len(timeline))
        return AnalysisResult(
            timeline=timeline,
            key=key,
            bpm=bpm,
            duration=waveform.duration,
            mode=mode,
        )


def analyze(
    waveform: Union[Waveform, np.ndarray],
    sample_rate: Optional[int] = None,
    tempo_hint: Optional[float] = None,
    mode: str = "balanced",
    config: Optional[AnalysisConfig] = None,
) -> AnalysisResult:
    """
    Analyze audio and return its chord timeline.

    Args:
        waveform: Waveform, or a 1-D sample array (then sample_rate is required)
        sample_rate: Sample rate of a raw array; must match a Waveform's rate if both given
        tempo_hint: Known tempo in BPM
        mode: "fast", "balanced" or "accurate"
        config: Optional AnalysisConfig

    Returns:
        AnalysisResult
    """
    if isinstance(waveform, Waveform):
        if sample_rate is not None and sample_rate != waveform.sample_rate:
            raise ValueError(
                f"Sample rate {sample_rate} does not match waveform sample rate "
                f"{waveform.sample_rate}"
            )
    else:
        if sample_rate is None:
            raise ValueError("sample_rate is required when passing a raw sample array")
        waveform = Waveform(samples=np.asarray(waveform), sample_rate=sample_rate)

    return ChordPipeline(config).run(waveform, tempo_hint=tempo_hint, mode=mode)
