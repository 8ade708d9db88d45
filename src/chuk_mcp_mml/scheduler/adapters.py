"""
Sound-source adapters - the boundary between the sequencer and whatever
actually makes sound.

Three collaborator shapes are supported:
- A list of raw tone generators, one per chord position
- A multi-pitch module that takes every frequency of an Event at once
- An indexed-trigger module addressed by semitone index (e.g. samples)

The shape is picked once by select_adapter() when parts are prepared;
the compiler and tokenizer never see it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, ClassVar, Protocol, runtime_checkable

from chuk_mcp_mml.constants import SourceShape
from chuk_mcp_mml.models.event import Event

logger = logging.getLogger(__name__)

ProcessCallback = Callable[..., Any]


@runtime_checkable
class ToneGenerator(Protocol):
    """A single tone generator that can be retuned, started and stopped."""

    def set_frequency(self, frequency: float, detune: float = 0.0) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class MultiPitchSource(ABC):
    """A polyphonic module that sounds a whole chord per call."""

    @abstractmethod
    def start(
        self,
        frequencies: Sequence[float],
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        """Start sounding the given frequencies (0.0 entries are rests)."""

    @abstractmethod
    def stop(self, frequencies: Sequence[float], on_process: ProcessCallback | None = None) -> None:
        """Stop sounding the given frequencies."""


class IndexedTriggerSource(ABC):
    """A module addressed by discrete semitone index rather than frequency."""

    @abstractmethod
    def start(
        self,
        index: int,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        """Trigger the sound for one index."""

    @abstractmethod
    def stop(self, index: int, on_process: ProcessCallback | None = None) -> None:
        """Release the sound for one index."""


class SourceAdapter(ABC):
    """Uniform start/stop over one collaborator shape."""

    shape: ClassVar[SourceShape]

    @abstractmethod
    def start(
        self,
        event: Event,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        """Start every sounding tone of the event."""

    @abstractmethod
    def stop(self, event: Event, on_process: ProcessCallback | None = None) -> None:
        """Stop every sounding tone of the event."""


class RawGeneratorAdapter(SourceAdapter):
    """
    Drives a fixed list of tone generators.

    Chord position i is played on generator i. Positions beyond the
    number of generators are dropped with a warning.
    """

    shape = SourceShape.RAW_GENERATORS

    def __init__(self, generators: Sequence[ToneGenerator]):
        self.generators = list(generators)

    def start(
        self,
        event: Event,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        for position, _, frequency in event.tones():
            generator = self._generator_at(position)
            if generator is None:
                continue
            generator.set_frequency(frequency, detune=0.0)
            generator.start()

    def stop(self, event: Event, on_process: ProcessCallback | None = None) -> None:
        for position, _, _ in event.tones():
            generator = self._generator_at(position)
            if generator is not None:
                generator.stop()

    def _generator_at(self, position: int) -> ToneGenerator | None:
        if position < len(self.generators):
            return self.generators[position]
        logger.warning(
            f"Chord position {position} has no generator ({len(self.generators)} available)"
        )
        return None


class MultiPitchAdapter(SourceAdapter):
    """Hands the whole frequency list of each Event to one module."""

    shape = SourceShape.MULTI_PITCH

    def __init__(self, source: MultiPitchSource):
        self.source = source

    def start(
        self,
        event: Event,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        self.source.start(list(event.frequencies), routing, on_process)

    def stop(self, event: Event, on_process: ProcessCallback | None = None) -> None:
        self.source.stop(list(event.frequencies), on_process)


class IndexedTriggerAdapter(SourceAdapter):
    """Calls an indexed module once per sounding tone."""

    shape = SourceShape.INDEXED_TRIGGER

    def __init__(self, source: IndexedTriggerSource):
        self.source = source

    def start(
        self,
        event: Event,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        for _, index, _ in event.tones():
            self.source.start(index, routing, on_process)

    def stop(self, event: Event, on_process: ProcessCallback | None = None) -> None:
        for _, index, _ in event.tones():
            self.source.stop(index, on_process)


_ADAPTERS: dict[SourceShape, type[SourceAdapter]] = {
    SourceShape.RAW_GENERATORS: RawGeneratorAdapter,
    SourceShape.MULTI_PITCH: MultiPitchAdapter,
    SourceShape.INDEXED_TRIGGER: IndexedTriggerAdapter,
}


def detect_shape(source: Any) -> SourceShape:
    """
    Work out which collaborator shape a source has.

    Raises:
        TypeError: If the source matches none of the shapes
    """
    if isinstance(source, SourceAdapter):
        return source.shape
    if isinstance(source, MultiPitchSource):
        return SourceShape.MULTI_PITCH
    if isinstance(source, IndexedTriggerSource):
        return SourceShape.INDEXED_TRIGGER
    if isinstance(source, (list, tuple)) and all(isinstance(g, ToneGenerator) for g in source):
        return SourceShape.RAW_GENERATORS
    raise TypeError(f"Unsupported sound source: {type(source).__name__}")


def select_adapter(source: Any, shape: SourceShape | None = None) -> SourceAdapter:
    """
    Wrap a sound source in the adapter for its shape.

    Args:
        source: Tone generator list, MultiPitchSource, IndexedTriggerSource,
            or an already-built SourceAdapter
        shape: Force a shape instead of detecting it (for duck-typed sources)

    Returns:
        SourceAdapter
    """
    if isinstance(source, SourceAdapter):
        return source
    resolved = shape if shape is not None else detect_shape(source)
    logger.debug(f"Using {resolved.value} adapter for {type(source).__name__}")
    return _ADAPTERS[resolved](source)
