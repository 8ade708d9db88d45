"""
Constants and enums for the MML system.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum
from fractions import Fraction
from typing import Final, Literal


class ErrorKind(str, Enum):
    """
    Kinds of MML compilation errors.

    All of them are unrecoverable for the notation string being compiled.
    """

    MML_STRING = "MML_STRING"  # No token matched at all
    TEMPO = "TEMPO"  # Non-positive BPM, or a note before any tempo
    OCTAVE = "OCTAVE"  # Negative octave, or a note before any octave
    NOTE = "NOTE"  # Negative index, or unknown duration code


class ErrorPolicy(str, Enum):
    """What a batch compile does when one notation string fails."""

    ABORT = "abort"  # Install nothing from the batch
    CONTINUE = "continue"  # Skip the failing string, keep the rest


class SourceShape(str, Enum):
    """The three sound-source collaborator shapes the sequencer can drive."""

    RAW_GENERATORS = "raw_generators"  # One tone generator per chord tone
    MULTI_PITCH = "multi_pitch"  # One module taking all frequencies at once
    INDEXED_TRIGGER = "indexed_trigger"  # One module addressed by tone index


# Marker stored in Event.indices for rests
REST: Final = "REST"
RestMarker = Literal["REST"]

# Equal temperament: index 0 is A0
A_REFERENCE_HZ: Final = 27.5
SEMITONES_PER_OCTAVE: Final = 12
RATIO: Final = 2 ** (1 / SEMITONES_PER_OCTAVE)

# Semitone offset of each pitch letter inside an octave (A = 12, so the
# octave boundary sits between B and C)
PITCH_OFFSETS: dict[str, int] = {
    "C": 3,
    "D": 5,
    "E": 7,
    "F": 8,
    "G": 10,
    "A": 12,
    "B": 14,
}

ACCIDENTALS: dict[str, int] = {
    "#": 1,
    "+": 1,
    "-": -1,
}

# Duration code -> length in quarter notes. Every code d is 1/d of a whole note.
DURATION_CODES: dict[int, Fraction] = {
    1: Fraction(4),  # whole
    2: Fraction(2),  # half
    4: Fraction(1),  # quarter
    6: Fraction(2, 3),  # quarter triplet
    8: Fraction(1, 2),  # eighth
    12: Fraction(1, 3),  # eighth triplet
    16: Fraction(1, 4),  # sixteenth
    18: Fraction(2, 9),  # quarter nonuplet
    24: Fraction(1, 6),  # sixteenth triplet
    32: Fraction(1, 8),  # 32nd
    36: Fraction(1, 9),  # eighth nonuplet
    48: Fraction(1, 12),  # 32nd triplet
    64: Fraction(1, 16),  # 64th
    72: Fraction(1, 18),  # sixteenth nonuplet
    96: Fraction(1, 24),  # 64th triplet
    128: Fraction(1, 32),  # 128th
    144: Fraction(1, 36),  # 32nd nonuplet
    192: Fraction(1, 48),  # 128th triplet
    256: Fraction(1, 64),  # 256th
}

DOT_MULTIPLIER: Final = Fraction(3, 2)

# MIDI note number of index 0 (A0)
MIDI_NOTE_OFFSET: Final = 21

# Schema versions - frozen for v1
SchemaVersion = Literal[
    "mml_score/v1",
    "song/v1",
]


class ErrorMessages:
    """Standardized error messages."""

    NO_TOKENS = "No MML tokens found in '{text}'."
    INVALID_TEMPO = "Invalid tempo: {bpm}. Must be greater than 0."
    INVALID_OCTAVE = "Invalid octave: {octave}. Must be 0 or greater."
    MISSING_TEMPO = "Note '{token}' appears before any tempo (T) directive."
    MISSING_OCTAVE = "Note '{token}' appears before any octave (O) directive."
    NEGATIVE_INDEX = "Note '{token}' resolves below the lowest playable pitch."
    INVALID_DURATION = "Unsupported duration code {code} in '{token}'."
    TEMPO_TOO_FAST = "Tempo in '{token}' is too fast to time any note."
    PITCH_OUT_OF_RANGE = "Note '{token}' resolves above the highest representable pitch."
    SONG_NOT_FOUND = "Song '{name}' not found."
    PART_NOT_FOUND = "No part at index {index}."


class SuccessMessages:
    """Standardized success messages."""

    SONG_CREATED = "Created song '{name}'."
    SONG_COMPILED = "Compiled song '{name}' to {path}."
    PART_ADDED = "Added part {index} to song '{name}'."
