"""Global constants for Chord Engine."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
PITCH_NAMES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Scales (intervals from the tonic)
MAJOR_SCALE = [0, 2, 4, 5, 7, 9, 11]
MINOR_SCALE = [0, 2, 3, 5, 7, 8, 10]  # Natural minor

# Audio processing defaults
DEFAULT_SR = 22050
DEFAULT_WINDOW_LENGTH = 4096
DEFAULT_HOP_SECONDS = 0.10

# Musical defaults
DEFAULT_TEMPO = 120.0
MIN_TEMPO = 60.0
MAX_TEMPO = 200.0

# Sentinel for "no bass pitch class" inside integer arrays
NO_PITCH = -1

ANALYSIS_MODES = ("fast", "balanced", "accurate")
