"""MIDI export of chord timelines."""

from pathlib import Path
from typing import Optional

import pretty_midi

from ..core import Timeline, parse_root, chord_intervals
from ..analysis.tempo import clamp_tempo, seconds_per_beat

CHORD_OCTAVE_BASE = 60  # C4
BASS_OCTAVE_BASE = 48  # C3


class ChordMIDIExporter:
    """Export a chord timeline as block chords."""

    def __init__(
        self,
        tempo: float = 120.0,
        instrument_name: str = "Acoustic Grand Piano",
        instrument_program: int = 0,
        velocity: int = 80,
    ):
        """
        Initialize ChordMIDIExporter.

        Args:
            tempo: Tempo in BPM
            instrument_name: MIDI instrument name
            instrument_program: MIDI program number (0-127)
            velocity: Note velocity (1-127)
        """
        self.tempo = clamp_tempo(tempo)
        self.instrument_name = instrument_name
        self.instrument_program = instrument_program
        self.velocity = velocity

    def chord_pitches(self, label: str) -> list:
        """
        MIDI pitches for a chord label.

        Chord tones sit in octave 4; a slash bass is added an octave below.
        Unparseable labels give no pitches.
        """
        root = parse_root(label)
        intervals = chord_intervals(label)
        if root is None or intervals is None:
            return []

        pitches = [CHORD_OCTAVE_BASE + root + interval for interval in intervals]
        if "/" in label:
            bass = parse_root(label.split("/", 1)[1])
            if bass is not None:
                pitches.insert(0, BASS_OCTAVE_BASE + bass)
        return pitches

    def timeline_to_pretty_midi(
        self,
        timeline: Timeline,
        end_time: Optional[float] = None,
    ) -> pretty_midi.PrettyMIDI:
        """
        Convert a timeline to a PrettyMIDI object without saving.

        Args:
            timeline: Chord timeline
            end_time: Clip end; the last chord lasts until here (one beat if omitted)
        """
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=self.instrument_name,
        )

        events = list(timeline)
        for i, event in enumerate(events):
            if i + 1 < len(events):
                end = events[i + 1].time
            elif end_time is not None and end_time > event.time:
                end = end_time
            else:
                end = event.time + seconds_per_beat(self.tempo)

            for pitch in self.chord_pitches(event.label):
                instrument.notes.append(
                    pretty_midi.Note(
                        velocity=self.velocity,
                        pitch=pitch,
                        start=event.time,
                        end=end,
                    )
                )

        midi.instruments.append(instrument)
        return midi

    def export(
        self,
        timeline: Timeline,
        output_path: str,
        end_time: Optional[float] = None,
    ) -> None:
        """
        Export a timeline to a MIDI file.

        Args:
            timeline: Chord timeline
            output_path: Path to output MIDI file
            end_time: Clip end in seconds
        """
        midi = self.timeline_to_pretty_midi(timeline, end_time)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))
