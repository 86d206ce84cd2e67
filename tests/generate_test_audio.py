"""Generate synthetic chord audio for testing."""

import os

import numpy as np
import librosa
from scipy.io import wavfile

# Fixture WAVs are written next to the tests
FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")

# MIDI notes of the test chords (triad in octave 4, root doubled two octaves down)
CHORD_NOTES = {
    "C": [48, 60, 64, 67],
    "F": [41, 57, 60, 65],
    "G": [43, 55, 59, 62],
    "Am": [45, 57, 60, 64],
    "Em": [40, 55, 59, 64],
}


def generate_sine_wave(freq: float, duration: float, sr: int = 22050) -> np.ndarray:
    """Generate a sine wave at given frequency."""
    t = np.linspace(0, duration, int(sr * duration), endpoint=False)
    return np.sin(2 * np.pi * freq * t).astype(np.float32)


def generate_chord(frequencies: list, duration: float, sr: int = 22050) -> np.ndarray:
    """Generate a chord by summing multiple sine waves at different frequencies."""
    voices = [generate_sine_wave(f, duration, sr) for f in frequencies]
    chord = np.sum(voices, axis=0)

    # Short attack/release to avoid clicks at chord boundaries
    envelope = np.ones_like(chord)
    attack = int(0.02 * sr)
    release = int(0.02 * sr)
    envelope[:attack] = np.linspace(0, 1, attack)
    envelope[-release:] = np.linspace(1, 0, release)
    chord = chord * envelope

    # Normalize to avoid clipping
    max_abs = np.max(np.abs(chord)) or 1.0
    chord = chord / max_abs
    return chord.astype(np.float32)


def generate_named_chord(label: str, duration: float, sr: int = 22050) -> np.ndarray:
    """Generate one of the chords in CHORD_NOTES."""
    return generate_chord(list(librosa.midi_to_hz(CHORD_NOTES[label])), duration, sr)


def generate_chord_progression(
    labels: list, durations: list, sr: int = 22050
) -> np.ndarray:
    """Generate a sequence of named chords."""
    audio = [generate_named_chord(label, dur, sr) for label, dur in zip(labels, durations)]
    return np.concatenate(audio)


def generate_click_track(bpm: float, duration: float, sr: int = 22050) -> np.ndarray:
    """Short decaying 1 kHz bursts on every beat."""
    audio = np.zeros(int(sr * duration), dtype=np.float32)
    burst_len = int(0.005 * sr)
    t = np.arange(burst_len) / sr
    burst = (np.sin(2 * np.pi * 1000 * t) * np.exp(-t * 400)).astype(np.float32)

    period = int(round(sr * 60.0 / bpm))
    for start in range(0, len(audio) - burst_len, period):
        audio[start:start + burst_len] = burst
    return audio


def save_wav(filepath: str, audio: np.ndarray, sr: int = 22050) -> str:
    """Save audio as a 16-bit WAV file."""
    audio_16bit = (np.clip(audio, -1.0, 1.0) * 32767).astype(np.int16)
    wavfile.write(filepath, sr, audio_16bit)
    return filepath


def main():
    sr = 22050
    os.makedirs(FIXTURES_DIR, exist_ok=True)

    # 1. I-V in C, two seconds each
    print("Generating c_g_progression.wav...")
    audio = generate_chord_progression(["C", "G"], [2.0, 2.0], sr)
    print("Created:", save_wav(os.path.join(FIXTURES_DIR, "c_g_progression.wav"), audio, sr))

    # 2. I-vi-IV-V in C, one bar each at 120 BPM
    print("Generating pop_progression.wav...")
    audio = generate_chord_progression(["C", "Am", "F", "G"], [2.0] * 4, sr)
    print("Created:", save_wav(os.path.join(FIXTURES_DIR, "pop_progression.wav"), audio, sr))

    # 3. Click track at 120 BPM
    print("Generating click_120.wav...")
    audio = generate_click_track(120.0, 8.0, sr)
    print("Created:", save_wav(os.path.join(FIXTURES_DIR, "click_120.wav"), audio, sr))

    print("\nAll test audio files generated!")


if __name__ == "__main__":
    main()
