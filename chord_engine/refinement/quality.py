"""Chord quality refinement - Upgrade triads to sevenths, ninths and sus chords."""

import logging
from typing import Dict, Optional

from ..core import Timeline, parse_root, pitch_name
from ..inference.templates import ChordTemplate, EXTENDED_TEMPLATES
from .base import RefinementPass, RefinementContext

logger = logging.getLogger(__name__)


class QualityRefiner(RefinementPass):
    """Re-score each chord against the extended template bank."""

    name = "quality"

    def __init__(
        self,
        templates: Optional[Dict[str, ChordTemplate]] = None,
        radius: int = 2,
    ):
        """
        Initialize QualityRefiner.

        Args:
            templates: Template bank in scoring order (default: EXTENDED_TEMPLATES)
            radius: Frames averaged on each side of the chord onset
        """
        self.templates = templates or EXTENDED_TEMPLATES
        self.radius = radius

    def best_template(self, chroma, root: int) -> Optional[ChordTemplate]:
        """Highest-scoring template; the first one wins a tie."""
        best = None
        best_score = float("-inf")
        for template in self.templates.values():
            score = template.score(chroma, root)
            if score > best_score:
                best_score = score
                best = template
        return best

    def refine(self, timeline: Timeline, context: RefinementContext) -> Timeline:
        events = []
        changed = 0
        for event in timeline:
            root = parse_root(event.label)
            chroma = context.features.local_chroma(event.frame_index, self.radius)
            if root is None:
                events.append(event)
                continue

            template = self.best_template(chroma, root)
            label = pitch_name(root) + template.suffix
            if label != event.label:
                changed += 1
            events.append(event.with_label(label))

        logger.debug("Quality refinement relabeled %d of %d chords", changed, len(timeline))
        return Timeline(events=events)
