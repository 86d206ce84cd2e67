"""Processing layer - Timeline post-processing.

This layer cleans up a decoded chord timeline:
- Short-segment removal (bass-change and key-aware exceptions)
- Beat-grid snapping
- Merging of adjacent repeated labels
"""

from .finalize import TimelineFinalizer, FinalizerConfig

__all__ = [
    "TimelineFinalizer",
    "FinalizerConfig",
]
