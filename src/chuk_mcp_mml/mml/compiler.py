"""
MML Compiler - compiles directives to timed Events.

The compiler walks directives left to right, carrying a CompilationState
(tempo, octave, time cursor), and resolves every note token to pitch
indices, frequencies and a duration in seconds.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from chuk_mcp_mml.constants import REST, ErrorKind, ErrorMessages, ErrorPolicy
from chuk_mcp_mml.core import Duration, bpm_to_seconds, fold_chord, index_to_frequency, parse_tones
from chuk_mcp_mml.mml.errors import MMLError
from chuk_mcp_mml.mml.tokenizer import (
    Directive,
    NoteDirective,
    OctaveDirective,
    TempoDirective,
    tokenize,
)
from chuk_mcp_mml.models.event import Event

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[ErrorKind, str], None]

_SEGMENT_PATTERN = re.compile(r"^(?P<letters>[A-Z#+\-]+?)(?P<code>\d+)(?P<dot>\.?)$")


@dataclass
class CompilationState:
    """
    Mutable state threaded through the compilation of one notation string.

    bpm_seconds and octave stay None until the first T and O directives.
    """

    bpm_seconds: float | None = None
    octave: int | None = None
    time_cursor: float = 0.0


class MMLCompiler:
    """
    Compiles MML notation strings to Events.

    Each string is compiled with its own CompilationState, so strings
    never share tempo or octave.
    """

    def __init__(self, policy: ErrorPolicy = ErrorPolicy.ABORT):
        """
        Initialize the compiler.

        Args:
            policy: What compile_batch does when one string fails
        """
        self.policy = policy

    def compile(self, text: str) -> list[Event]:
        """
        Tokenize and compile one notation string.

        Raises:
            MMLError: On the first error in the string
        """
        events = self.compile_directives(tokenize(text))
        logger.debug(f"Compiled {len(events)} events from {text!r}")
        return events

    def compile_directives(self, directives: Iterable[Directive]) -> list[Event]:
        """
        Compile directives to Events, strictly left to right.

        Args:
            directives: Directives from tokenize()

        Returns:
            Events in timeline order

        Raises:
            MMLError: TEMPO, OCTAVE or NOTE on the first invalid directive
        """
        state = CompilationState()
        events: list[Event] = []

        for directive in directives:
            if isinstance(directive, TempoDirective):
                if directive.bpm <= 0:
                    raise MMLError(
                        ErrorKind.TEMPO,
                        directive.raw,
                        ErrorMessages.INVALID_TEMPO.format(bpm=directive.bpm),
                    )
                bpm_seconds = bpm_to_seconds(directive.bpm)
                if not bpm_seconds > 0:
                    raise MMLError(
                        ErrorKind.TEMPO,
                        directive.raw,
                        ErrorMessages.TEMPO_TOO_FAST.format(token=directive.raw),
                    )
                state.bpm_seconds = bpm_seconds

            elif isinstance(directive, OctaveDirective):
                if directive.octave < 0:
                    raise MMLError(
                        ErrorKind.OCTAVE,
                        directive.raw,
                        ErrorMessages.INVALID_OCTAVE.format(octave=directive.octave),
                    )
                state.octave = directive.octave

            elif isinstance(directive, NoteDirective):
                events.append(self._compile_note(directive.raw, state))

        return events

    def compile_batch(
        self,
        notations: Sequence[str],
        on_error: ErrorCallback | None = None,
    ) -> dict[int, list[Event]]:
        """
        Compile several notation strings, one part each.

        Under ErrorPolicy.ABORT the first failure reports through on_error
        and nothing from the batch is returned. Under ErrorPolicy.CONTINUE
        each failing string is reported and skipped; the others keep their
        position in the batch as their part index.

        Args:
            notations: Notation strings
            on_error: Called once per failing string with (kind, token)

        Returns:
            Mapping of part index to Events
        """
        compiled: dict[int, list[Event]] = {}

        for index, text in enumerate(notations):
            try:
                compiled[index] = self.compile(text)
            except MMLError as e:
                logger.warning(f"Part {index} failed to compile: {e}")
                if on_error is not None:
                    on_error(e.kind, e.token)
                if self.policy == ErrorPolicy.ABORT:
                    return {}

        return compiled

    def _compile_note(self, raw: str, state: CompilationState) -> Event:
        """Resolve one note/chord token and advance the time cursor."""
        if state.bpm_seconds is None:
            raise MMLError(ErrorKind.TEMPO, raw, ErrorMessages.MISSING_TEMPO.format(token=raw))
        if state.octave is None:
            raise MMLError(ErrorKind.OCTAVE, raw, ErrorMessages.MISSING_OCTAVE.format(token=raw))

        segments = [_split_segment(segment, raw) for segment in raw.split("&")]

        # Pitches come from the first segment; tied segments only add time
        tones = parse_tones(segments[0][0])
        raw_indices = [None if tone.is_rest else tone.index_in(state.octave) for tone in tones]
        folded = fold_chord(raw_indices)

        indices: list[int | str] = []
        for index in folded:
            if index is None:
                indices.append(REST)
            elif index < 0:
                raise MMLError(ErrorKind.NOTE, raw, ErrorMessages.NEGATIVE_INDEX.format(token=raw))
            else:
                indices.append(index)

        durations: list[Duration] = []
        for _, code, dotted in segments:
            if not Duration.is_supported(code):
                raise MMLError(
                    ErrorKind.NOTE,
                    raw,
                    ErrorMessages.INVALID_DURATION.format(code=code, token=raw),
                )
            durations.append(Duration.from_code(code, dotted))

        total = sum(durations[1:], durations[0])
        duration = total.to_seconds(state.bpm_seconds)
        if not duration > 0:
            raise MMLError(ErrorKind.TEMPO, raw, ErrorMessages.TEMPO_TOO_FAST.format(token=raw))

        event = Event(
            indices=tuple(indices),
            frequencies=_frequencies(indices, raw),
            start=state.time_cursor,
            duration=duration,
            stop=state.time_cursor + duration,
        )
        state.time_cursor += duration
        return event


def _frequencies(indices: Sequence[int | str], raw: str) -> tuple[float, ...]:
    """Frequencies for resolved indices; very high octaves overflow a float."""
    try:
        frequencies = tuple(index_to_frequency(index) for index in indices)
    except OverflowError:
        frequencies = (math.inf,)
    if not all(math.isfinite(f) for f in frequencies):
        raise MMLError(ErrorKind.NOTE, raw, ErrorMessages.PITCH_OUT_OF_RANGE.format(token=raw))
    return frequencies


def _split_segment(segment: str, raw: str) -> tuple[str, int, bool]:
    """Split 'CE-8.' into ('CE-', 8, True)."""
    match = _SEGMENT_PATTERN.match(segment.upper())
    if match is None:
        raise MMLError(ErrorKind.NOTE, raw, f"Malformed note segment '{segment}' in '{raw}'")
    try:
        code = int(match.group("code"))
    except ValueError:
        raise MMLError(ErrorKind.NOTE, raw, f"Duration code too long in '{raw[:16]}...'") from None
    return match.group("letters"), code, bool(match.group("dot"))


def compile_mml(text: str) -> list[Event]:
    """
    Convenience function to compile one notation string.

    Args:
        text: MML notation string

    Returns:
        Events in timeline order

    Raises:
        MMLError: On the first error in the string
    """
    return MMLCompiler().compile(text)


def compile_batch(
    notations: Sequence[str],
    policy: ErrorPolicy = ErrorPolicy.ABORT,
    on_error: ErrorCallback | None = None,
) -> dict[int, list[Event]]:
    """
    Convenience function to compile several notation strings.

    See MMLCompiler.compile_batch.
    """
    return MMLCompiler(policy).compile_batch(notations, on_error)
