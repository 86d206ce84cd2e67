"""Tempo estimation."""

import logging

import numpy as np
import librosa

from ..core import Waveform
from ..core.constants import (
    DEFAULT_TEMPO,
    DEFAULT_WINDOW_LENGTH,
    DEFAULT_HOP_SECONDS,
    MIN_TEMPO,
    MAX_TEMPO,
)

logger = logging.getLogger(__name__)


def clamp_tempo(bpm: float, min_bpm: float = MIN_TEMPO, max_bpm: float = MAX_TEMPO) -> float:
    """Clamp a tempo into the supported range; falsy tempos become the default."""
    if not bpm or not np.isfinite(bpm):
        bpm = DEFAULT_TEMPO
    return float(max(min_bpm, min(max_bpm, bpm)))


def seconds_per_beat(bpm: float) -> float:
    """Beat period of a (clamped) tempo."""
    return 60.0 / clamp_tempo(bpm)


class TempoAnalyzer:
    """Estimate tempo from a waveform.

    The default method autocorrelates the short-time energy envelope; the
    ``beat_track`` method defers to librosa's beat tracker.
    """

    METHODS = ("autocorrelation", "beat_track")

    def __init__(
        self,
        method: str = "autocorrelation",
        window_length: int = DEFAULT_WINDOW_LENGTH,
        hop_seconds: float = DEFAULT_HOP_SECONDS,
        min_bpm: float = MIN_TEMPO,
        max_bpm: float = MAX_TEMPO,
        shortest_period: float = 0.3,  # 200 BPM
        longest_period: float = 2.0,  # 30 BPM
    ):
        """
        Initialize TempoAnalyzer.

        Args:
            method: "autocorrelation" or "beat_track"
            window_length: Samples per energy frame
            hop_seconds: Seconds between energy frames
            min_bpm: Lower clamp for the result
            max_bpm: Upper clamp for the result
            shortest_period: Shortest beat period searched (seconds)
            longest_period: Longest beat period searched (seconds)
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown tempo method '{method}'. Valid: {', '.join(self.METHODS)}")
        self.method = method
        self.window_length = window_length
        self.hop_seconds = hop_seconds
        self.min_bpm = min_bpm
        self.max_bpm = max_bpm
        self.shortest_period = shortest_period
        self.longest_period = longest_period

    def estimate(self, waveform: Waveform) -> float:
        """
        Estimate tempo in BPM, rounded and clamped to [min_bpm, max_bpm].

        Args:
            waveform: Mono input signal

        Returns:
            Tempo in BPM
        """
        if self.method == "beat_track":
            bpm = self._beat_track(waveform)
        else:
            bpm = self._energy_autocorrelation(waveform)
        bpm = clamp_tempo(round(bpm), self.min_bpm, self.max_bpm)
        logger.debug("Estimated tempo: %.0f BPM (%s)", bpm, self.method)
        return bpm

    def energy_envelope(self, waveform: Waveform) -> np.ndarray:
        """Short-time energy per hop (unwindowed sum of squares)."""
        hop = max(1, int(np.floor(self.hop_seconds * waveform.sample_rate)))
        samples = waveform.samples
        if len(samples) < self.window_length:
            return np.zeros(0)
        frames = librosa.util.frame(
            np.ascontiguousarray(samples),
            frame_length=self.window_length,
            hop_length=hop,
            axis=0,
        )
        return np.sum(frames ** 2, axis=1)

    def _energy_autocorrelation(self, waveform: Waveform) -> float:
        envelope = self.energy_envelope(waveform)
        if len(envelope) < 2:
            return DEFAULT_TEMPO

        hop_seconds = max(1, int(np.floor(self.hop_seconds * waveform.sample_rate))) / waveform.sample_rate
        # Small offset keeps 0.3 / 0.1 from flooring to 2
        min_lag = max(1, int(np.floor(self.shortest_period / hop_seconds + 1e-6)))
        max_lag = int(np.floor(self.longest_period / hop_seconds + 1e-6))
        if max_lag < min_lag:
            return DEFAULT_TEMPO

        acf = librosa.autocorrelate(envelope, max_size=max_lag + 1)
        # Lags past the envelope length have no overlap and score 0
        scores = np.zeros(max_lag + 1)
        scores[: len(acf)] = acf
        best_lag = min_lag + int(np.argmax(scores[min_lag:max_lag + 1]))

        return 60.0 / (best_lag * hop_seconds)

    def _beat_track(self, waveform: Waveform) -> float:
        if len(waveform.samples) == 0:
            return DEFAULT_TEMPO
        tempo, _ = librosa.beat.beat_track(
            y=waveform.samples.astype(np.float32),
            sr=waveform.sample_rate,
        )

        # Handle tempo as array (newer librosa versions)
        if isinstance(tempo, np.ndarray):
            tempo = float(tempo[0]) if len(tempo) > 0 else DEFAULT_TEMPO

        # Sustained tones can give no usable beat
        if tempo is None or tempo <= 0:
            return DEFAULT_TEMPO
        return float(tempo)
