"""Signal-side data types: the input waveform and per-frame features."""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from .constants import NO_PITCH


@dataclass(frozen=True, eq=False)
class Waveform:
    """A single-channel audio signal ready for analysis."""

    samples: np.ndarray
    sample_rate: int
    tempo: Optional[float] = None  # BPM estimate supplied by the caller

    def __post_init__(self):
        samples = np.asarray(self.samples, dtype=np.float64)
        if samples.ndim != 1:
            raise ValueError(
                f"Waveform must be mono (1-D), got array with shape {samples.shape}. "
                "Mix channels down before analysis."
            )
        if self.sample_rate is None or self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        if samples.size and not np.all(np.isfinite(samples)):
            raise ValueError("Waveform contains NaN or infinite samples")
        if self.tempo is not None and self.tempo <= 0:
            raise ValueError(f"Tempo must be positive when given, got {self.tempo}")
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self.samples) / self.sample_rate

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True, eq=False)
class FrameFeatures:
    """Features of a single analysis frame."""

    chroma: np.ndarray  # 12 weights summing to 1, or all zero
    bass_pitch_class: Optional[int]
    frame_energy: float
    spectral_centroid: float  # Hz


@dataclass(eq=False)
class FeatureSet:
    """Time-ordered per-frame features; frame index is time."""

    chroma: np.ndarray  # [n_frames, 12]
    bass_pitch_class: np.ndarray  # [n_frames], NO_PITCH where undetected
    frame_energy: np.ndarray  # [n_frames]
    spectral_centroid: np.ndarray  # [n_frames]
    hop_length: int
    sample_rate: int

    def __post_init__(self):
        self.chroma = np.asarray(self.chroma, dtype=np.float64).reshape(-1, 12)
        self.bass_pitch_class = np.asarray(self.bass_pitch_class, dtype=np.int64).reshape(-1)
        self.frame_energy = np.asarray(self.frame_energy, dtype=np.float64).reshape(-1)
        self.spectral_centroid = np.asarray(self.spectral_centroid, dtype=np.float64).reshape(-1)

        n = len(self.chroma)
        lengths = {
            "bass_pitch_class": len(self.bass_pitch_class),
            "frame_energy": len(self.frame_energy),
            "spectral_centroid": len(self.spectral_centroid),
        }
        mismatched = {name: size for name, size in lengths.items() if size != n}
        if mismatched:
            raise ValueError(
                f"Per-frame feature lengths disagree with chroma ({n} frames): {mismatched}"
            )

    @classmethod
    def empty(cls, hop_length: int, sample_rate: int) -> "FeatureSet":
        """A feature set with no frames."""
        return cls(
            chroma=np.zeros((0, 12)),
            bass_pitch_class=np.zeros(0, dtype=np.int64),
            frame_energy=np.zeros(0),
            spectral_centroid=np.zeros(0),
            hop_length=hop_length,
            sample_rate=sample_rate,
        )

    @property
    def n_frames(self) -> int:
        return len(self.chroma)

    @property
    def hop_seconds(self) -> float:
        """Seconds between consecutive frame starts."""
        return self.hop_length / self.sample_rate

    def __len__(self) -> int:
        return self.n_frames

    def __iter__(self) -> Iterator[FrameFeatures]:
        for i in range(self.n_frames):
            yield self.frame(i)

    def frame(self, index: int) -> FrameFeatures:
        """Get the features of one frame."""
        return FrameFeatures(
            chroma=self.chroma[index],
            bass_pitch_class=self.bass_at(index),
            frame_energy=float(self.frame_energy[index]),
            spectral_centroid=float(self.spectral_centroid[index]),
        )

    def frame_time(self, index: int) -> float:
        """Start time of a frame in seconds."""
        return index * self.hop_seconds

    def bass_at(self, index: int) -> Optional[int]:
        """Stabilized bass pitch class at a frame, None if absent or out of range."""
        if index < 0 or index >= self.n_frames:
            return None
        pc = int(self.bass_pitch_class[index])
        return None if pc == NO_PITCH else pc

    def local_chroma(self, index: int, radius: int = 2) -> np.ndarray:
        """
        Average chroma over frames [index - radius, index + radius].

        The window is clamped to the available frames.
        """
        if self.n_frames == 0:
            return np.zeros(12)
        start = max(0, index - radius)
        end = min(self.n_frames - 1, index + radius)
        if start > end:
            return np.zeros(12)
        return self.chroma[start:end + 1].mean(axis=0)
