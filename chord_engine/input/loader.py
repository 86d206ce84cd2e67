"""Audio loading and preprocessing utilities."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import librosa

from ..core import Waveform, DEFAULT_SR

logger = logging.getLogger(__name__)


class AudioLoader:
    """Decode audio files into mono waveforms."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        target_sr: Optional[int] = DEFAULT_SR,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Target sample rate for resampling (None keeps the file's rate)
            normalize: Peak-normalize the audio if True
        """
        self.target_sr = target_sr
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load audio file, mix it down to mono and resample.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {', '.join(sorted(self.SUPPORTED_FORMATS))}"
            )

        # Load with librosa (handles resampling and mono conversion)
        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)
        logger.debug("Loaded %s: %d samples at %d Hz", path.name, len(audio), sr)

        if self.normalize:
            audio = self._normalize(audio)

        return audio, sr

    def load_waveform(self, path: str, tempo: Optional[float] = None) -> Waveform:
        """Load an audio file as a Waveform."""
        audio, sr = self.load(path)
        return Waveform(samples=audio, sample_rate=sr, tempo=tempo)

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if len(audio) else 0.0
        if peak > 0:
            audio = audio / peak
        return audio
