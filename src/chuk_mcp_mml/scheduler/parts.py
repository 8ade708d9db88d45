"""
Part store - the per-voice Event queues the sequencer consumes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_mml.models.event import Event


class PartState(str, Enum):
    """Playback state of one part."""

    IDLE = "idle"
    PLAYING = "playing"


class Part:
    """
    An ordered sequence of Events for one voice.

    Built once from compiled Events and stored reversed, so the next
    Event is always popped from the tail.
    """

    def __init__(self, events: Sequence[Event]):
        self.events: tuple[Event, ...] = tuple(events)
        self._queue: list[Event] = list(reversed(self.events))

    def pop(self) -> Event | None:
        """Remove and return the next Event, or None when exhausted."""
        if not self._queue:
            return None
        return self._queue.pop()

    @property
    def remaining(self) -> int:
        """Number of Events not yet popped."""
        return len(self._queue)

    @property
    def duration(self) -> float:
        """Length of the whole part in seconds."""
        return self.events[-1].stop if self.events else 0.0

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self) -> str:
        return f"Part({len(self.events)} events, {self.remaining} remaining)"


@dataclass
class PartEntry:
    """
    Registry entry for one part.

    timer is the pending asyncio handle while the part is playing.
    last_event is the most recently popped Event; it stays set after
    playback ends and is None only if the part was never played.
    """

    part: Part
    timer: asyncio.TimerHandle | None = None
    last_event: Event | None = None

    @property
    def state(self) -> PartState:
        return PartState.IDLE if self.timer is None else PartState.PLAYING

    @property
    def is_playing(self) -> bool:
        return self.timer is not None
