"""
Core music primitives.

These are the mathematical invariants the compiler is built on:
- PitchLetter: The seven pitch letters and their offsets inside an octave
- Tone: A pitch letter with accidental, or a rest
- Duration: Note lengths as exact fractions of a quarter note
"""

from chuk_mcp_mml.core.pitch import (
    PitchLetter,
    Tone,
    fold_chord,
    index_to_frequency,
    index_to_midi,
    parse_tones,
    spell,
)
from chuk_mcp_mml.core.rhythm import Duration, bpm_to_seconds

__all__ = [
    # Pitch
    "PitchLetter",
    "Tone",
    "fold_chord",
    "index_to_frequency",
    "index_to_midi",
    "parse_tones",
    "spell",
    # Rhythm
    "Duration",
    "bpm_to_seconds",
]
