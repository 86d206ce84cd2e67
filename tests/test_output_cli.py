"""Tests for chord export and the command-line interface."""

import json

import pytest
import numpy as np
import pretty_midi
from pathlib import Path
import sys
from typer.testing import CliRunner

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from chord_engine.core import ChordEvent, Timeline
from chord_engine.output import ChordMIDIExporter, LabExporter
from chord_engine.input import AudioLoader
from chord_engine.cli import app, StageTimings
from generate_test_audio import generate_chord_progression, save_wav


SR = 22050
runner = CliRunner()


@pytest.fixture
def timeline():
    return Timeline([ChordEvent(0.0, "C", 0), ChordEvent(2.0, "G/B", 20)])


@pytest.fixture(scope="module")
def progression_wav(tmp_path_factory):
    """WAV file with two seconds of C then two seconds of G."""
    path = tmp_path_factory.mktemp("audio") / "c_g.wav"
    audio = generate_chord_progression(["C", "G"], [2.0, 2.0], SR)
    return Path(save_wav(str(path), audio, SR))


def parse_json_output(output: str) -> dict:
    data, _ = json.JSONDecoder().raw_decode(output[output.index("{"):])
    return data


class TestChordMIDIExporter:
    """Test MIDI export of chord timelines."""

    def test_chord_pitches(self):
        exporter = ChordMIDIExporter()
        assert exporter.chord_pitches("C") == [60, 64, 67]
        assert exporter.chord_pitches("Am") == [69, 72, 76]
        assert exporter.chord_pitches("G7") == [67, 71, 74, 77]

    def test_slash_bass_an_octave_down(self):
        assert ChordMIDIExporter().chord_pitches("C/E") == [52, 60, 64, 67]

    def test_unparseable_label_is_silent(self):
        assert ChordMIDIExporter().chord_pitches("N") == []

    def test_durations(self, timeline):
        midi = ChordMIDIExporter(tempo=120).timeline_to_pretty_midi(timeline, end_time=4.0)
        notes = midi.instruments[0].notes
        assert len(notes) == 3 + 4
        first = [n for n in notes if n.start == 0.0]
        assert all(n.end == pytest.approx(2.0) for n in first)
        last = [n for n in notes if n.start == 2.0]
        assert all(n.end == pytest.approx(4.0) for n in last)
        assert min(n.pitch for n in last) == 59

    def test_last_chord_lasts_a_beat_without_end(self, timeline):
        midi = ChordMIDIExporter(tempo=120).timeline_to_pretty_midi(timeline)
        last = [n for n in midi.instruments[0].notes if n.start == 2.0]
        assert all(n.end == pytest.approx(2.5) for n in last)

    def test_export_round_trip(self, timeline, tmp_path):
        path = tmp_path / "out" / "chords.mid"
        ChordMIDIExporter(tempo=120).export(timeline, str(path), end_time=4.0)
        assert path.exists()
        loaded = pretty_midi.PrettyMIDI(str(path))
        assert len(loaded.instruments[0].notes) == 7
        assert loaded.get_end_time() == pytest.approx(4.0, abs=0.01)


class TestLabExporter:
    """Test .lab export."""

    def test_lines(self, timeline):
        lines = LabExporter().to_lines(timeline, end_time=4.0)
        assert lines == ["0.000\t2.000\tC", "2.000\t4.000\tG/B"]

    def test_export(self, timeline, tmp_path):
        path = tmp_path / "chords.lab"
        LabExporter().export(timeline, str(path), end_time=4.0)
        assert path.read_text(encoding="utf-8").splitlines() == [
            "0.000\t2.000\tC",
            "2.000\t4.000\tG/B",
        ]

    def test_empty_timeline(self, tmp_path):
        path = tmp_path / "empty.lab"
        LabExporter().export(Timeline(), str(path))
        assert path.read_text(encoding="utf-8") == ""


class TestAudioLoader:
    """Test audio file loading."""

    def test_load_waveform(self, progression_wav):
        wave = AudioLoader().load_waveform(str(progression_wav), tempo=120)
        assert wave.sample_rate == SR
        assert wave.duration == pytest.approx(4.0, abs=0.01)
        assert wave.tempo == 120

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AudioLoader().load(str(tmp_path / "missing.wav"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not audio")
        with pytest.raises(ValueError, match="Unsupported format"):
            AudioLoader().load(str(path))

    def test_normalize(self, progression_wav):
        audio, _ = AudioLoader(normalize=True).load(str(progression_wav))
        assert np.max(np.abs(audio)) == pytest.approx(1.0)


class TestCLI:
    """Test the typer command-line interface."""

    def test_analyze_json(self, progression_wav):
        result = runner.invoke(app, ["analyze", str(progression_wav), "--tempo", "120", "--json"])
        assert result.exit_code == 0, result.output
        data = parse_json_output(result.output)
        assert [c["label"] for c in data["chords"]] == ["C", "G"]
        assert data["bpm"] == 120.0
        assert data["mode"] == "balanced"

    def test_analyze_table(self, progression_wav):
        result = runner.invoke(app, ["analyze", str(progression_wav), "--tempo", "120"])
        assert result.exit_code == 0, result.output
        assert "Detected Chords" in result.output
        assert "Analysis complete" in result.output

    def test_analyze_exports(self, progression_wav, tmp_path):
        midi_path = tmp_path / "chords.mid"
        lab_path = tmp_path / "chords.lab"
        result = runner.invoke(app, [
            "analyze", str(progression_wav),
            "--tempo", "120",
            "--midi", str(midi_path),
            "--lab", str(lab_path),
        ])
        assert result.exit_code == 0, result.output
        assert midi_path.exists()
        lines = lab_path.read_text(encoding="utf-8").splitlines()
        assert [line.split("\t")[2] for line in lines] == ["C", "G"]

    def test_analyze_missing_file(self, tmp_path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.wav")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_analyze_bad_mode(self, progression_wav):
        result = runner.invoke(app, ["analyze", str(progression_wav), "--mode", "turbo"])
        assert result.exit_code == 1
        assert "Unknown mode" in result.output

    def test_info(self, progression_wav):
        result = runner.invoke(app, ["info", str(progression_wav)])
        assert result.exit_code == 0, result.output
        assert "Sample rate: 22050 Hz" in result.output
        assert "Estimated key" in result.output


class TestStageTimings:
    """Test per-stage timing."""

    def test_measure_records_stages_in_order(self):
        timings = StageTimings()
        with timings.measure("Loading"):
            pass
        with timings.measure("Analysis"):
            pass
        assert list(timings.stages) == ["Loading", "Analysis"]
        assert all(seconds >= 0 for seconds in timings.stages.values())

    def test_measure_records_failed_stage(self):
        timings = StageTimings()
        with pytest.raises(ValueError):
            with timings.measure("Analysis"):
                raise ValueError("boom")
        assert "Analysis" in timings.stages
