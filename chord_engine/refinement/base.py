"""Base classes for timeline refinement passes."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core import FeatureSet, Key, Timeline


@dataclass(frozen=True)
class RefinementContext:
    """Read-only analysis state shared by every refinement pass."""

    features: FeatureSet
    key: Key
    bpm: float


class RefinementPass(ABC):
    """A transformation of a finalized timeline.

    Passes never modify the timeline they are given; ``apply`` merges any
    adjacent labels the pass made equal before handing the result on.
    """

    name: str = "refinement"

    @abstractmethod
    def refine(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        """
        Refine a timeline.

        Args:
            timeline: Timeline from the previous stage
            context: Features, key and tempo of the analysis

        Returns:
            New timeline
        """
        pass

    def apply(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        """Run the pass and restore the no-adjacent-repeat invariant."""
        return Timeline.from_events(self.refine(timeline, context))
