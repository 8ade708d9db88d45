"""
MML tokenizer - splits a notation string into directives.

Three token forms are recognised (case-insensitive):
- Tempo:  T<digits>           e.g. T120
- Octave: O<digits>           e.g. O4
- Note:   <letters><code>[.] optionally followed by &<letters><code>[.] ties
          e.g. C4, CEG8., C#4&C#16, R2

Whitespace between tokens is insignificant. Duration codes are captured
as digits here and checked against the supported set by the compiler.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from chuk_mcp_mml.constants import ErrorKind, ErrorMessages
from chuk_mcp_mml.mml.errors import MMLError

logger = logging.getLogger(__name__)

_LETTERS = r"(?:[CDEFGABR][#+-]?)+"
_SEGMENT = rf"{_LETTERS}\d+\.?"

TOKEN_PATTERN = re.compile(
    rf"(?P<tempo>T(?P<bpm>\d+))"
    rf"|(?P<octave>O(?P<n>\d+))"
    rf"|(?P<note>{_SEGMENT}(?:&{_SEGMENT})*)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TempoDirective:
    """T<bpm> - sets the tempo for the following notes."""

    bpm: int
    raw: str


@dataclass(frozen=True)
class OctaveDirective:
    """O<n> - sets the octave for the following notes."""

    octave: int
    raw: str


@dataclass(frozen=True)
class NoteDirective:
    """A note, chord or rest with its (possibly tied) duration suffix."""

    raw: str


Directive = TempoDirective | OctaveDirective | NoteDirective


def tokenize(text: str) -> list[Directive]:
    """
    Split a notation string into directives, left to right.

    Args:
        text: MML notation string

    Returns:
        Ordered list of directives

    Raises:
        MMLError: MML_STRING if no token matches at all, TEMPO or OCTAVE if
            a directive number is too long to read

    Example:
        tokenize("T120 O4 CEG4") ->
            [TempoDirective(120, 'T120'), OctaveDirective(4, 'O4'), NoteDirective('CEG4')]
    """
    directives: list[Directive] = []
    position = 0

    for match in TOKEN_PATTERN.finditer(text):
        _warn_skipped(text[position : match.start()])
        position = match.end()

        raw = match.group(0).upper()
        if match.group("tempo"):
            bpm = _to_int(match.group("bpm"), ErrorKind.TEMPO, raw)
            directives.append(TempoDirective(bpm, raw))
        elif match.group("octave"):
            octave = _to_int(match.group("n"), ErrorKind.OCTAVE, raw)
            directives.append(OctaveDirective(octave, raw))
        else:
            directives.append(NoteDirective(raw))

    if not directives:
        raise MMLError(
            ErrorKind.MML_STRING,
            "",
            ErrorMessages.NO_TOKENS.format(text=text),
        )

    _warn_skipped(text[position:])
    return directives


def _warn_skipped(gap: str) -> None:
    """Log any non-whitespace text the token pattern stepped over."""
    skipped = gap.strip()
    if skipped:
        logger.warning(f"Skipping unrecognised MML text: {skipped!r}")


def _to_int(digits: str, kind: ErrorKind, raw: str) -> int:
    """Read a directive number; int() refuses digit strings past its size limit."""
    try:
        return int(digits)
    except ValueError:
        raise MMLError(kind, raw, f"Number too long in '{raw[:16]}...'") from None
