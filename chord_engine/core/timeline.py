"""Harmony-side data types: key, chord candidates, chord events and timelines."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .pitch import pitch_name, scale_pitch_classes, in_key, chord_mask


@dataclass(frozen=True)
class Key:
    """Detected tonal center."""

    root: int  # Pitch class 0-11
    is_minor: bool = False
    score: float = 0.0  # Profile correlation of the winning key

    @property
    def name(self) -> str:
        """Key as text, e.g. "G major"."""
        return f"{pitch_name(self.root)} {'minor' if self.is_minor else 'major'}"

    @property
    def label(self) -> str:
        """Key as a chord-style label, e.g. "Am"."""
        return pitch_name(self.root) + ("m" if self.is_minor else "")

    @property
    def scale_pitch_classes(self) -> List[int]:
        return scale_pitch_classes(self.root, self.is_minor)

    def contains(self, pc: Optional[int]) -> bool:
        """Check whether a pitch class is diatonic to this key."""
        return in_key(pc, self.root, self.is_minor)


@dataclass(frozen=True)
class KeyCandidate:
    """A candidate key with its profile score."""

    root: int
    is_minor: bool
    score: float

    @property
    def name(self) -> str:
        return f"{pitch_name(self.root)} {'minor' if self.is_minor else 'major'}"

    def to_key(self) -> Key:
        return Key(root=self.root, is_minor=self.is_minor, score=self.score)


@dataclass(frozen=True)
class ChordCandidate:
    """A triad hypothesis used as a tracking state."""

    root: int
    quality: str  # "major" or "minor"

    @property
    def is_minor(self) -> bool:
        return self.quality == "minor"

    @property
    def label(self) -> str:
        return pitch_name(self.root) + ("m" if self.is_minor else "")

    @property
    def intervals(self) -> List[int]:
        return [0, 3, 7] if self.is_minor else [0, 4, 7]

    @property
    def mask(self) -> np.ndarray:
        """Binary 12-dim triad mask (root, third, fifth)."""
        return chord_mask(self.root, self.intervals)


class OrnamentType(Enum):
    """Structural role of a chord event."""
    STRUCTURAL = "structural"
    PASSING = "passing"
    NEIGHBOR = "neighbor"
    PEDAL = "pedal"


@dataclass(frozen=True)
class ChordEvent:
    """A chord change at a point in time."""

    time: float  # Onset in seconds
    label: str  # Chord symbol, e.g. "Am7/G"
    frame_index: int  # Feature frame the chord was detected at
    ornament_type: OrnamentType = OrnamentType.STRUCTURAL

    def with_label(self, label: str) -> "ChordEvent":
        return replace(self, label=label)

    def to_dict(self) -> dict:
        return {
            "time": round(self.time, 6),
            "label": self.label,
            "frame_index": self.frame_index,
            "ornament_type": self.ornament_type.value,
        }


@dataclass
class Timeline:
    """Ordered chord events: strictly increasing times, no adjacent repeats.

    Stages treat a timeline as immutable and return new ones.
    """

    events: List[ChordEvent] = field(default_factory=list)

    @classmethod
    def from_events(cls, events: Iterable[ChordEvent]) -> "Timeline":
        """Build a timeline, merging adjacent events that share a label."""
        merged: List[ChordEvent] = []
        for event in events:
            if merged and merged[-1].label == event.label:
                continue
            merged.append(event)
        return cls(events=merged)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[ChordEvent]:
        return iter(self.events)

    def __getitem__(self, index):
        return self.events[index]

    @property
    def labels(self) -> List[str]:
        return [e.label for e in self.events]

    @property
    def times(self) -> List[float]:
        return [e.time for e in self.events]

    def durations(self, end_time: Optional[float] = None) -> List[float]:
        """
        Duration of each event (time to the next event).

        Args:
            end_time: End of the last event; the last duration is 0 if omitted
        """
        times: Sequence[float] = self.times
        result = [b - a for a, b in zip(times, times[1:])]
        if times:
            last_end = end_time if end_time is not None else times[-1]
            result.append(max(0.0, last_end - times[-1]))
        return result

    def is_well_formed(self) -> bool:
        """Check the strictly-increasing-time and no-adjacent-repeat invariants."""
        for prev, cur in zip(self.events, self.events[1:]):
            if cur.time <= prev.time or cur.label == prev.label:
                return False
        return all(e.time >= 0 for e in self.events)

    def to_dicts(self) -> List[dict]:
        return [e.to_dict() for e in self.events]
