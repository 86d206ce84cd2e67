"""Ornament classification - Mark passing, neighbor and pedal chords."""

import logging
from dataclasses import replace

from ..core import Timeline, OrnamentType, DEFAULT_TEMPO, parse_root, interval_distance
from .base import RefinementPass, RefinementContext

logger = logging.getLogger(__name__)


class OrnamentClassifier(RefinementPass):
    """Label each chord as structural, passing, neighbor or pedal.

    Checks run in order passing, neighbor, pedal; a later match
    overrides an earlier one.
    """

    name = "ornament"

    def __init__(
        self,
        passing_beats: float = 0.35,
        neighbor_beats: float = 0.4,
        max_step: int = 2,
    ):
        """
        Initialize OrnamentClassifier.

        Args:
            passing_beats: Passing chords are shorter than this many beats
            neighbor_beats: Neighbor chords are shorter than this many beats
            max_step: Largest root motion (semitones) counted as stepwise
        """
        self.passing_beats = passing_beats
        self.neighbor_beats = neighbor_beats
        self.max_step = max_step

    def refine(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        # Tempo is taken as given; the pipeline clamps it before this pass
        spb = 60.0 / (context.bpm or DEFAULT_TEMPO)
        features = context.features
        events = list(timeline)
        result = []

        for i, event in enumerate(events):
            prev = events[i - 1] if i > 0 else None
            following = events[i + 1] if i + 1 < len(events) else None
            duration = following.time - event.time if following else spb
            ornament = OrnamentType.STRUCTURAL

            if duration < self.passing_beats * spb and prev and following:
                roots = [parse_root(e.label) for e in (prev, event, following)]
                if None not in roots:
                    step_in = interval_distance(roots[0], roots[1])
                    step_out = interval_distance(roots[1], roots[2])
                    if step_in <= self.max_step and step_out <= self.max_step:
                        ornament = OrnamentType.PASSING

            if (
                duration < self.neighbor_beats * spb
                and prev
                and following
                and prev.label == following.label
            ):
                ornament = OrnamentType.NEIGHBOR

            if prev:
                bass_here = features.bass_at(event.frame_index)
                bass_prev = features.bass_at(prev.frame_index)
                if bass_here is not None and bass_here == bass_prev:
                    root, prev_root = parse_root(event.label), parse_root(prev.label)
                    if root is not None and prev_root is not None and root != prev_root:
                        ornament = OrnamentType.PEDAL

            result.append(replace(event, ornament_type=ornament))

        counts = {kind.value: sum(e.ornament_type is kind for e in result) for kind in OrnamentType}
        logger.debug("Ornament classes: %s", counts)
        return Timeline(events=result)
