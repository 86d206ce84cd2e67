"""Timeline finalization - Drop fleeting chords and snap onsets to beats."""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from ..core import FeatureSet, Key, ChordEvent, Timeline, parse_root
from ..analysis.tempo import seconds_per_beat

logger = logging.getLogger(__name__)


@dataclass
class FinalizerConfig:
    """Configuration for timeline finalization.

    Attributes:
        min_duration_floor: Absolute minimum chord duration in seconds (default: 0.5)
        min_duration_beats: Minimum chord duration in beats (default: 0.45)
        last_event_beats: Assumed length of the final chord in beats (default: 4)
    """

    min_duration_floor: float = 0.5
    min_duration_beats: float = 0.45
    last_event_beats: float = 4.0


class TimelineFinalizer:
    """Remove too-short chords and quantize chord onsets to the beat grid.

    Filtering and snapping repeat until the timeline stops changing, so
    finalizing an already finalized timeline returns it unchanged.
    """

    def __init__(self, config: Optional[FinalizerConfig] = None):
        self.config = config or FinalizerConfig()

    def min_duration(self, bpm: float) -> float:
        """Shortest chord that survives filtering at this tempo."""
        spb = seconds_per_beat(bpm)
        return max(self.config.min_duration_floor, self.config.min_duration_beats * spb)

    def finalize(
        self,
        timeline: Timeline,
        key: Key,
        bpm: float,
        features: FeatureSet,
    ) -> Timeline:
        """
        Finalize a tracked timeline.

        Args:
            timeline: Coarse timeline from the tracker
            key: Detected key
            bpm: Tempo (clamped to 60-200 BPM)
            features: Feature set the timeline was tracked from

        Returns:
            Filtered, beat-snapped timeline
        """
        events = list(timeline)
        # Each pass either removes an event or leaves the list unchanged
        for _ in range(len(events) + 2):
            filtered = self.remove_short(events, key, bpm, features)
            snapped = self.snap_to_beats(filtered, bpm)
            if snapped == events:
                break
            events = snapped

        logger.debug("Finalized %d -> %d chord events", len(timeline), len(events))
        return Timeline(events=events)

    def remove_short(
        self,
        events: List[ChordEvent],
        key: Key,
        bpm: float,
        features: FeatureSet,
    ) -> List[ChordEvent]:
        """
        Merge short chords into the preceding kept chord.

        A short chord survives when the bass changes across its end, or when
        it is in the key and the preceding kept chord is not.
        """
        spb = seconds_per_beat(bpm)
        min_dur = self.min_duration(bpm)
        kept: List[ChordEvent] = []

        for i, event in enumerate(events):
            following = events[i + 1] if i + 1 < len(events) else None
            end = following.time if following else event.time + self.config.last_event_beats * spb
            duration = end - event.time

            if duration < min_dur and kept:
                next_frame = following.frame_index if following else event.frame_index + 1
                next_frame = min(features.n_frames - 1, next_frame)
                bass_here = features.bass_at(event.frame_index)
                bass_next = features.bass_at(next_frame)
                bass_changed = (
                    bass_here is not None
                    and bass_next is not None
                    and bass_here != bass_next
                )

                if not bass_changed:
                    short_in_key = key.contains(parse_root(event.label))
                    prev_in_key = key.contains(parse_root(kept[-1].label))
                    if not short_in_key or prev_in_key:
                        continue

            kept.append(event)

        return kept

    def snap_to_beats(self, events: List[ChordEvent], bpm: float) -> List[ChordEvent]:
        """
        Quantize onsets to the nearest beat and merge repeated labels.

        When two chords land on the same beat the later one takes it.
        """
        spb = seconds_per_beat(bpm)
        snapped: List[ChordEvent] = []

        for event in events:
            time = max(0.0, round(event.time / spb) * spb)
            if snapped and snapped[-1].time == time:
                snapped.pop()
            if snapped and snapped[-1].label == event.label:
                continue
            snapped.append(replace(event, time=time))

        return snapped
