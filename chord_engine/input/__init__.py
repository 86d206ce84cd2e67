"""Input layer - Audio file decoding."""

from .loader import AudioLoader

__all__ = ["AudioLoader"]
