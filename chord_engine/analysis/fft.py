"""Radix-2 Cooley-Tukey FFT, vectorized across frames."""

from functools import lru_cache
from typing import Tuple

import numpy as np


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    size = 1
    while size < n:
        size <<= 1
    return size


@lru_cache(maxsize=16)
def _bit_reversal_permutation(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def fft(frames: np.ndarray) -> np.ndarray:
    """
    Complex spectrum of each frame along the last axis.

    Frames are zero-padded to the next power of two.

    Args:
        frames: Array [..., frame_length]

    Returns:
        Complex array [..., n_fft]

    Raises:
        ValueError: If the frame length is zero
    """
    frames = np.asarray(frames)
    length = frames.shape[-1] if frames.ndim else 0
    if length == 0:
        raise ValueError("Cannot transform an empty frame")

    n_fft = next_power_of_two(length)
    buf = np.zeros(frames.shape[:-1] + (n_fft,), dtype=np.complex128)
    buf[..., :length] = frames
    buf = buf[..., _bit_reversal_permutation(n_fft)]

    size = 2
    while size <= n_fft:
        half = size // 2
        twiddle = np.exp(-2j * np.pi * np.arange(half) / size)
        blocks = buf.reshape(buf.shape[:-1] + (n_fft // size, size))
        even = blocks[..., :half]
        odd = blocks[..., half:] * twiddle
        buf = np.concatenate([even + odd, even - odd], axis=-1).reshape(buf.shape)
        size <<= 1

    return buf


def magnitude_spectrum(frames: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Magnitudes of the non-negative frequency bins 0 .. n_fft/2 - 1.

    Returns:
        Tuple of (magnitudes [..., n_fft // 2], n_fft)
    """
    spectrum = fft(frames)
    n_fft = spectrum.shape[-1]
    return np.abs(spectrum[..., : max(1, n_fft // 2)]), n_fft
