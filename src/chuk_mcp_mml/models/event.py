"""
Event model - one fully resolved note or chord on a part's timeline.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from chuk_mcp_mml.constants import REST


@dataclass(frozen=True)
class Event:
    """
    A compiled note, chord or rest.

    indices and frequencies are parallel: position i of a chord has
    indices[i] (semitone index, or REST) and frequencies[i] (Hz, 0.0
    for REST). start and stop are offsets in seconds on the part's own
    timeline, not wall-clock time.
    """

    indices: tuple[int | str, ...]
    frequencies: tuple[float, ...]
    start: float
    duration: float
    stop: float

    def __post_init__(self) -> None:
        """Validate the event."""
        if len(self.indices) != len(self.frequencies):
            raise ValueError(
                f"indices and frequencies must be parallel, "
                f"got {len(self.indices)} and {len(self.frequencies)}"
            )
        if self.duration <= 0:
            raise ValueError(f"Duration must be positive, got {self.duration}")
        if self.start < 0:
            raise ValueError(f"Start must be >= 0, got {self.start}")
        for index in self.indices:
            if index != REST and (not isinstance(index, int) or index < 0):
                raise ValueError(f"Index must be a non-negative int or REST, got {index!r}")

    @property
    def is_rest(self) -> bool:
        """True when no position of the event sounds."""
        return all(index == REST for index in self.indices)

    def tones(self) -> Iterator[tuple[int, int, float]]:
        """
        Yield (position, index, frequency) for every sounding tone.

        Rests are skipped, but positions keep counting them so callers
        see the tone's place in the original chord.
        """
        for position, (index, frequency) in enumerate(zip(self.indices, self.frequencies)):
            if index == REST:
                continue
            yield position, int(index), frequency

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "indices": list(self.indices),
            "frequencies": list(self.frequencies),
            "start": self.start,
            "duration": self.duration,
            "stop": self.stop,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Event:
        """Create from dictionary."""
        return cls(
            indices=tuple(d["indices"]),
            frequencies=tuple(float(f) for f in d["frequencies"]),
            start=d["start"],
            duration=d["duration"],
            stop=d["stop"],
        )
