"""
Pitch primitives - PitchLetter, Tone and equal-temperament helpers.

Indices count semitones upward from A0 (index 0, 27.5 Hz).
MML octave n starts at its C, so it spans indices
12*(n-1)+3 .. 12*(n-1)+14 and O4 C is index 39 (middle C).
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from chuk_mcp_mml.constants import (
    A_REFERENCE_HZ,
    ACCIDENTALS,
    MIDI_NOTE_OFFSET,
    PITCH_OFFSETS,
    RATIO,
    REST,
    SEMITONES_PER_OCTAVE,
)

# Display names for index % 12 (index 0 is A)
_SHARP_NAMES: list[str] = [
    "A",
    "A#",
    "B",
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
]

_TONE_PATTERN = re.compile(r"([CDEFGABR])([#+-]?)", re.IGNORECASE)


class PitchLetter(IntEnum):
    """
    The seven MML pitch letters, valued by their offset inside an octave.

    R (rest) is not a pitch letter; it is handled by Tone.
    """

    C = PITCH_OFFSETS["C"]
    D = PITCH_OFFSETS["D"]
    E = PITCH_OFFSETS["E"]
    F = PITCH_OFFSETS["F"]
    G = PITCH_OFFSETS["G"]
    A = PITCH_OFFSETS["A"]
    B = PITCH_OFFSETS["B"]

    def index_in(self, octave: int, accidental: int = 0) -> int:
        """Raw semitone index of this letter in the given octave."""
        return SEMITONES_PER_OCTAVE * (octave - 1) + self.value + accidental

    @classmethod
    def parse(cls, name: str) -> PitchLetter:
        """Parse a pitch letter like 'c' or 'G'."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown pitch letter: {name}") from None


@dataclass(frozen=True)
class Tone:
    """
    One letter of a chord token: a pitch letter with accidental, or a rest.

    Examples:
        Tone(PitchLetter.C, 1)  = C#
        Tone(PitchLetter.B, -1) = B flat
        Tone(None)              = R
    """

    letter: PitchLetter | None
    accidental: int = 0

    @property
    def is_rest(self) -> bool:
        return self.letter is None

    def index_in(self, octave: int) -> int:
        """Raw (unfolded) index of this tone in the given octave."""
        if self.letter is None:
            raise ValueError("A rest has no pitch index")
        return self.letter.index_in(octave, self.accidental)

    def __str__(self) -> str:
        if self.letter is None:
            return "R"
        suffix = {1: "#", -1: "-"}.get(self.accidental, "")
        return f"{self.letter.name}{suffix}"


def parse_tones(text: str) -> list[Tone]:
    """
    Split the pitch-letter portion of a note token into tones.

    'CE-G' -> [C, E flat, G]. Characters that are not pitch letters or
    accidentals are ignored; callers pass only the letter portion.
    """
    tones: list[Tone] = []
    for letter, accidental in _TONE_PATTERN.findall(text):
        letter = letter.upper()
        if letter == "R":
            tones.append(Tone(None))
        else:
            tones.append(Tone(PitchLetter[letter], ACCIDENTALS.get(accidental, 0)))
    return tones


def fold_chord(indices: Sequence[int | None]) -> list[int | None]:
    """
    Keep a chord compact below its first tone.

    Every tone after the first whose index is >= the first tone's index
    is lowered by one octave. None entries (rests) pass through, and a
    chord that starts with a rest is left unfolded.

    Example:
        [39, 43, 46] (C E G) -> [39, 31, 34]
    """
    if not indices or indices[0] is None:
        return list(indices)

    first = indices[0]
    folded: list[int | None] = [first]
    for index in indices[1:]:
        if index is not None and index >= first:
            index -= SEMITONES_PER_OCTAVE
        folded.append(index)
    return folded


def index_to_frequency(index: int | str) -> float:
    """
    Equal-temperament frequency of an index, 0.0 for a rest.

    freq = 27.5 * 2^(index/12)
    """
    if index == REST:
        return 0.0
    return A_REFERENCE_HZ * RATIO ** int(index)


def index_to_midi(index: int) -> int:
    """Convert an index to a MIDI note number. Index 0 (A0) = 21."""
    return index + MIDI_NOTE_OFFSET


def spell(index: int | str) -> str:
    """
    Human-readable name of an index.

    Octave numbers follow the MML octave the tone would be written in,
    so spell(39) == 'C4'.
    """
    if index == REST:
        return "R"
    index = int(index)
    octave = (index - 3) // SEMITONES_PER_OCTAVE + 1
    return f"{_SHARP_NAMES[index % SEMITONES_PER_OCTAVE]}{octave}"
