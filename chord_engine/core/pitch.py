"""Pitch-class arithmetic and chord label parsing."""

import re
from typing import List, Optional, Tuple

import numpy as np

from .constants import PITCH_NAMES, PITCH_NAMES_FLAT, MAJOR_SCALE, MINOR_SCALE

ROOT_PATTERN = re.compile(r"^([A-G])([#b]?)")

# "m" not followed by "aj" marks a minor third (Am, Am7, Am9; not Cmaj7)
MINOR_MARKER = re.compile(r"m(?!aj)")

# Anything beyond a bare triad
DECORATION_PATTERN = re.compile(r"(sus|dim|aug|maj7|7|9|add9|m7b5|11|13|6|alt)")

_NATURALS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}


def to_pitch_class(n: int) -> int:
    """Wrap any integer into the 0-11 pitch-class range."""
    return int(n) % 12


def pitch_name(pc: int, flats: bool = False) -> str:
    """Get note name for a pitch class (sharp spelling by default)."""
    names = PITCH_NAMES_FLAT if flats else PITCH_NAMES
    return names[to_pitch_class(pc)]


def interval_distance(a: int, b: int) -> int:
    """Shortest distance between two pitch classes around the circle (0-6)."""
    up = to_pitch_class(b - a)
    return min(up, 12 - up)


def scale_pitch_classes(root: int, is_minor: bool) -> List[int]:
    """Pitch classes of the major or natural-minor scale on ``root``."""
    scale = MINOR_SCALE if is_minor else MAJOR_SCALE
    return [to_pitch_class(root + step) for step in scale]


def in_key(pc: Optional[int], key_root: int, is_minor: bool) -> bool:
    """Check whether a pitch class is diatonic to the key."""
    if pc is None:
        return False
    scale = MINOR_SCALE if is_minor else MAJOR_SCALE
    return to_pitch_class(pc - key_root) in scale


def split_label(label: str) -> Optional[Tuple[str, str]]:
    """
    Split a chord label into root name and suffix.

    Returns:
        ("F#", "m7/A") for "F#m7/A", or None if the label has no root
    """
    if not isinstance(label, str):
        return None
    match = ROOT_PATTERN.match(label)
    if not match:
        return None
    root_name = match.group(0)
    return root_name, label[len(root_name):]


def parse_root(label: str) -> Optional[int]:
    """
    Parse the root pitch class of a chord label.

    Accepts sharp and flat spellings ("C#m" and "Dbm" both give 1).

    Returns:
        Pitch class 0-11, or None if the label doesn't start with a note name
    """
    if not isinstance(label, str):
        return None
    match = ROOT_PATTERN.match(label)
    if not match:
        return None
    pc = _NATURALS[match.group(1)]
    accidental = match.group(2)
    if accidental == "#":
        pc += 1
    elif accidental == "b":
        pc -= 1
    return to_pitch_class(pc)


def is_plain_minor(label: str) -> bool:
    """True for an undecorated minor triad label such as "Am" or "C#m"."""
    parts = split_label(label)
    if parts is None:
        return False
    _, suffix = parts
    if DECORATION_PATTERN.search(suffix):
        return False
    return MINOR_MARKER.match(suffix) is not None


def chord_intervals(label: str) -> Optional[List[int]]:
    """
    Reconstruct the chord-tone intervals (semitones above the root) of a label.

    The triad shape comes from the sus2, sus4 and minor markers ("dim" reads
    as minor, "aug" as major). Any "7" adds the minor seventh, "maj7" the
    major seventh instead, and any "9" adds the ninth. Slash basses are
    ignored.

    Returns:
        Sorted list of intervals in 0-11, or None for an unparseable label
    """
    parts = split_label(label)
    if parts is None:
        return None
    suffix = parts[1].split("/", 1)[0]

    if "sus2" in suffix:
        intervals = [0, 2, 7]
    elif "sus4" in suffix:
        intervals = [0, 5, 7]
    elif MINOR_MARKER.search(suffix):
        intervals = [0, 3, 7]
    else:
        intervals = [0, 4, 7]

    if "maj7" in suffix:
        intervals.append(11)
    elif "7" in suffix:
        intervals.append(10)

    if "9" in suffix:
        intervals.append(2)

    return sorted(set(intervals))


def chord_mask(root: int, intervals: List[int]) -> np.ndarray:
    """Binary 12-dim mask with ones at the chord tones."""
    mask = np.zeros(12)
    for interval in intervals:
        mask[to_pitch_class(root + interval)] = 1.0
    return mask
