"""Modal correction - Resolve minor/major ambiguity on III, V and VII of minor keys."""

import logging

from ..core import Timeline, MINOR_SCALE, parse_root, split_label, to_pitch_class
from ..core.pitch import MINOR_MARKER, is_plain_minor
from .base import RefinementPass, RefinementContext

logger = logging.getLogger(__name__)

# Scale degrees III, V and VII of the natural minor
AMBIGUOUS_DEGREES = (MINOR_SCALE[2], MINOR_SCALE[4], MINOR_SCALE[6])


class ModalCorrector(RefinementPass):
    """Turn minor chords major when the major third clearly dominates.

    In minor keys the third, fifth and seventh degrees are often played as
    major chords (relative major, harmonic-minor dominant, subtonic).
    """

    name = "modal"

    def __init__(
        self,
        ratio: float = 1.25,
        floor: float = 0.08,
        radius: int = 2,
    ):
        """
        Initialize ModalCorrector.

        Args:
            ratio: Required major-third / minor-third energy ratio
            floor: Minimum major-third chroma energy
            radius: Frames averaged on each side of the chord onset
        """
        self.ratio = ratio
        self.floor = floor
        self.radius = radius

    def refine(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        key = context.key
        if not key.is_minor:
            return Timeline(events=list(timeline))

        events = []
        for event in timeline:
            root = parse_root(event.label)
            if root is None or not is_plain_minor(event.label):
                events.append(event)
                continue

            if to_pitch_class(root - key.root) not in AMBIGUOUS_DEGREES:
                events.append(event)
                continue

            chroma = context.features.local_chroma(event.frame_index, self.radius)
            major_third = chroma[to_pitch_class(root + 4)]
            minor_third = chroma[to_pitch_class(root + 3)]

            if major_third > minor_third * self.ratio and major_third > self.floor:
                root_name, suffix = split_label(event.label)
                label = root_name + MINOR_MARKER.sub("", suffix, count=1)
                logger.debug("Modal correction at %.2fs: %s -> %s", event.time, event.label, label)
                events.append(event.with_label(label))
            else:
                events.append(event)

        return Timeline(events=events)
