"""Feature extraction: chroma, bass pitch class, energy and spectral centroid."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import librosa

from ..core import Waveform, FeatureSet, NO_PITCH
from ..core.constants import DEFAULT_WINDOW_LENGTH, DEFAULT_HOP_SECONDS
from ..core.numeric import EPSILON, lower_percentile
from .fft import magnitude_spectrum

logger = logging.getLogger(__name__)


@dataclass
class FeatureConfig:
    """Configuration for frame-level feature extraction.

    Attributes:
        window_length: Samples per analysis frame (default: 4096)
        hop_seconds: Time between frame starts (default: 0.10)
        chroma_fmin: Lowest frequency folded into chroma, Hz (default: 80)
        chroma_fmax: Highest frequency folded into chroma, Hz (default: 5000)
        bass_fmin: Lowest accepted bass fundamental, Hz (default: 40)
        bass_fmax: Low-pass cutoff and highest bass fundamental, Hz (default: 250)
        bass_energy_percentile: Frames below this energy percentile never
            carry a bass note (default: 40)
        min_bass_run: Shortest run of identical bass values kept (default: 2)
        block_size: Frames transformed per batch (default: 256)
    """

    window_length: int = DEFAULT_WINDOW_LENGTH
    hop_seconds: float = DEFAULT_HOP_SECONDS
    chroma_fmin: float = 80.0
    chroma_fmax: float = 5000.0
    bass_fmin: float = 40.0
    bass_fmax: float = 250.0
    bass_energy_percentile: float = 40.0
    min_bass_run: int = 2
    block_size: int = 256

    def validate(self) -> None:
        """Raise ValueError for settings that cannot produce frames."""
        if self.window_length <= 0:
            raise ValueError(f"window_length must be positive, got {self.window_length}")
        if self.hop_seconds <= 0:
            raise ValueError(f"hop_seconds must be positive, got {self.hop_seconds}")
        if not 0 < self.bass_fmin < self.bass_fmax:
            raise ValueError(
                f"Invalid bass range: {self.bass_fmin}-{self.bass_fmax} Hz"
            )
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")

    def hop_length(self, sample_rate: int) -> int:
        """Hop in samples for a sample rate (at least 1)."""
        return max(1, int(np.floor(self.hop_seconds * sample_rate)))


def stabilize_bass(
    raw_bass: np.ndarray,
    frame_energy: np.ndarray,
    energy_percentile: float = 40.0,
    min_run: int = 2,
) -> np.ndarray:
    """
    Suppress unstable per-frame bass estimates.

    A frame keeps its estimate only if a neighbour agrees and the frame is
    loud enough; runs shorter than ``min_run`` are then cleared. The first
    and last frames have a single neighbour and are always cleared.

    Args:
        raw_bass: Per-frame bass pitch classes (NO_PITCH where undetected)
        frame_energy: Per-frame energies
        energy_percentile: Loudness threshold percentile
        min_run: Minimum run length to keep

    Returns:
        Stabilized bass pitch classes
    """
    raw_bass = np.asarray(raw_bass, dtype=np.int64)
    n = len(raw_bass)
    stable = np.full(n, NO_PITCH, dtype=np.int64)
    if n == 0:
        return stable

    threshold = lower_percentile(frame_energy, energy_percentile)

    for i in range(1, n - 1):
        value = raw_bass[i]
        if value == NO_PITCH or frame_energy[i] < threshold:
            continue
        if raw_bass[i - 1] == value or raw_bass[i + 1] == value:
            stable[i] = value

    i = 0
    while i < n:
        value = stable[i]
        if value == NO_PITCH:
            i += 1
            continue
        end = i
        while end + 1 < n and stable[end + 1] == value:
            end += 1
        if end - i + 1 < min_run:
            stable[i:end + 1] = NO_PITCH
        i = end + 1

    return stable


class FeatureExtractor:
    """Extracts per-frame chroma and bass features from a waveform."""

    def __init__(self, config: Optional[FeatureConfig] = None):
        """
        Initialize FeatureExtractor.

        Args:
            config: Optional FeatureConfig (defaults are used otherwise)

        Raises:
            ValueError: If the configuration is degenerate
        """
        self.config = config or FeatureConfig()
        self.config.validate()

    def extract(self, waveform: Waveform) -> FeatureSet:
        """
        Compute the feature set of a waveform.

        A waveform shorter than one window gives an empty feature set.

        Args:
            waveform: Mono input signal

        Returns:
            FeatureSet with one record per frame
        """
        sr = waveform.sample_rate
        hop_length = self.config.hop_length(sr)
        frames = self.frame_signal(waveform.samples, hop_length)

        if len(frames) == 0:
            logger.info("Signal shorter than one window; no frames to analyze")
            return FeatureSet.empty(hop_length, sr)

        window = np.hanning(self.config.window_length)
        chroma_blocks, bass_blocks, energy_blocks, centroid_blocks = [], [], [], []

        for start in range(0, len(frames), self.config.block_size):
            block = frames[start:start + self.config.block_size] * window
            chroma, bass, energy, centroid = self._analyze_block(block, sr)
            chroma_blocks.append(chroma)
            bass_blocks.append(bass)
            energy_blocks.append(energy)
            centroid_blocks.append(centroid)

        frame_energy = np.concatenate(energy_blocks)
        raw_bass = np.concatenate(bass_blocks)
        bass = stabilize_bass(
            raw_bass,
            frame_energy,
            energy_percentile=self.config.bass_energy_percentile,
            min_run=self.config.min_bass_run,
        )

        logger.debug(
            "Extracted %d frames (%d with stable bass)",
            len(frames),
            int(np.sum(bass != NO_PITCH)),
        )

        return FeatureSet(
            chroma=np.concatenate(chroma_blocks),
            bass_pitch_class=bass,
            frame_energy=frame_energy,
            spectral_centroid=np.concatenate(centroid_blocks),
            hop_length=hop_length,
            sample_rate=sr,
        )

    def frame_signal(self, samples: np.ndarray, hop_length: int) -> np.ndarray:
        """
        Slice a signal into overlapping frames.

        Returns:
            Frames [n_frames, window_length]; empty if the signal is too short
        """
        win = self.config.window_length
        if len(samples) < win:
            return np.zeros((0, win))
        return librosa.util.frame(
            np.ascontiguousarray(samples, dtype=np.float64),
            frame_length=win,
            hop_length=hop_length,
            axis=0,
        )

    def _analyze_block(
        self, frames: np.ndarray, sr: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Features of a batch of windowed frames."""
        energy = np.sum(frames ** 2, axis=1)
        mags, n_fft = magnitude_spectrum(frames)
        freqs = np.arange(mags.shape[1]) * sr / n_fft

        chroma, centroid = self._chroma_and_centroid(mags, freqs)
        bass = self._detect_bass(mags, freqs, sr)
        return chroma, bass, energy, centroid

    def _chroma_and_centroid(
        self, mags: np.ndarray, freqs: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Fold in-band magnitudes into 12 pitch classes."""
        band = np.zeros(len(freqs), dtype=bool)
        band[1:] = True
        band &= (freqs >= self.config.chroma_fmin) & (freqs <= self.config.chroma_fmax)
        band_freqs = freqs[band]
        band_mags = mags[:, band]

        n_frames = len(mags)
        if band_freqs.size == 0:
            return np.zeros((n_frames, 12)), np.zeros(n_frames)

        # Round half up to the nearest MIDI note
        midi = np.floor(librosa.hz_to_midi(band_freqs) + 0.5).astype(np.int64)
        projection = np.zeros((band_freqs.size, 12))
        projection[np.arange(band_freqs.size), midi % 12] = 1.0

        chroma = band_mags @ projection
        total = chroma.sum(axis=1)
        voiced = total > 0
        chroma[voiced] /= total[voiced, None]

        centroid = np.zeros(n_frames)
        centroid[voiced] = (band_mags[voiced] @ band_freqs) / total[voiced]
        return chroma, centroid

    def _detect_bass(self, mags: np.ndarray, freqs: np.ndarray, sr: int) -> np.ndarray:
        """
        Raw bass pitch class per frame.

        Rebuilds a low-passed signal from the bins below ``bass_fmax`` as a
        sum of cosines and picks the autocorrelation peak within the bass
        fundamental range.
        """
        cfg = self.config
        n_frames = len(mags)
        win = cfg.window_length
        result = np.full(n_frames, NO_PITCH, dtype=np.int64)

        low = np.zeros(len(freqs), dtype=bool)
        low[1:] = freqs[1:] <= cfg.bass_fmax
        min_lag = int(np.floor(sr / cfg.bass_fmax))
        max_lag = min(int(np.floor(sr / max(1.0, cfg.bass_fmin))), win - 1)
        if not low.any() or min_lag < 1 or min_lag > max_lag:
            return result

        omega = 2 * np.pi * freqs[low] / sr
        cosines = np.cos(np.outer(omega, np.arange(win)))
        low_passed = mags[:, low] @ cosines

        centered = low_passed - low_passed.mean(axis=1, keepdims=True)
        denom = np.maximum(np.sum(centered ** 2, axis=1), EPSILON)
        acf = librosa.autocorrelate(centered, max_size=max_lag + 1, axis=-1)
        corr = acf[:, min_lag:max_lag + 1] / denom[:, None]

        best = np.argmax(corr, axis=1)
        best_corr = corr[np.arange(n_frames), best]
        f0 = sr / (min_lag + best)

        valid = (best_corr > -1.0) & (f0 >= cfg.bass_fmin) & (f0 <= cfg.bass_fmax)
        midi = np.floor(librosa.hz_to_midi(f0[valid]) + 0.5).astype(np.int64)
        result[valid] = midi % 12
        return result
