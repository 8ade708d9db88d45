"""
Rhythm primitives - Duration.

Durations are kept as exact Fractions of a quarter note until the
compiler converts them to seconds with the current tempo.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import ClassVar

from chuk_mcp_mml.constants import DOT_MULTIPLIER, DURATION_CODES


@dataclass(frozen=True)
class Duration:
    """
    A rhythmic duration expressed in quarter-note beats.

    Uses Fraction for exact representation of tuplet subdivisions.
    A quarter note is 1 beat (Fraction(1)).

    Immutable and hashable.
    """

    beats: Fraction

    WHOLE: ClassVar[Duration]
    HALF: ClassVar[Duration]
    QUARTER: ClassVar[Duration]
    EIGHTH: ClassVar[Duration]
    SIXTEENTH: ClassVar[Duration]

    def __post_init__(self) -> None:
        if self.beats <= 0:
            raise ValueError(f"Duration must be positive, got {self.beats}")

    @classmethod
    def from_code(cls, code: int, dotted: bool = False) -> Duration:
        """
        Build a duration from an MML duration code.

        Args:
            code: One of the supported codes (1, 2, 4, 6, 8, 12, ...)
            dotted: Whether a trailing '.' was present

        Returns:
            Duration

        Raises:
            ValueError: If the code is not supported
        """
        if code not in DURATION_CODES:
            raise ValueError(f"Unsupported duration code: {code}")
        duration = cls(DURATION_CODES[code])
        return duration.dotted() if dotted else duration

    @staticmethod
    def is_supported(code: int) -> bool:
        """Check whether a duration code is in the closed set."""
        return code in DURATION_CODES

    def dotted(self) -> Duration:
        """Return a dotted version (1.5x length)."""
        return Duration(self.beats * DOT_MULTIPLIER)

    def to_seconds(self, bpm_seconds: float) -> float:
        """
        Convert to seconds.

        Args:
            bpm_seconds: Length of one quarter note in seconds (60 / bpm)
        """
        return float(self.beats) * bpm_seconds

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.beats + other.beats)

    def __str__(self) -> str:
        name_map = {
            Fraction(4): "whole",
            Fraction(2): "half",
            Fraction(1): "quarter",
            Fraction(1, 2): "eighth",
            Fraction(1, 4): "sixteenth",
            Fraction(3, 2): "dotted quarter",
            Fraction(2, 3): "quarter triplet",
            Fraction(1, 3): "eighth triplet",
        }
        if self.beats in name_map:
            return name_map[self.beats]
        return f"{self.beats} beats"


Duration.WHOLE = Duration(Fraction(4))
Duration.HALF = Duration(Fraction(2))
Duration.QUARTER = Duration(Fraction(1))
Duration.EIGHTH = Duration(Fraction(1, 2))
Duration.SIXTEENTH = Duration(Fraction(1, 4))


def bpm_to_seconds(bpm: int | float) -> float:
    """Length of one quarter note in seconds at the given tempo."""
    if bpm <= 0:
        raise ValueError(f"Tempo must be positive, got {bpm}")
    return 60 / bpm
