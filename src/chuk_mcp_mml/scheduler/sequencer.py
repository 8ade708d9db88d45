"""
MML Sequencer - plays compiled parts through a sound-source adapter.

Each part runs its own timeline on the asyncio event loop:

    Idle --play()--> Playing --(event duration elapses)--> next Event ... --> Idle
                        |--halt()--> Idle

play() pops the next Event, starts it on the adapter and arms a
loop.call_later() timer for the Event's duration. When the timer fires
the Event is stopped and play() runs again for the same part, arming a
fresh timer. Parts are independent; only events within one part are
ordered.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from chuk_mcp_mml.constants import ErrorKind, ErrorMessages, ErrorPolicy, SourceShape
from chuk_mcp_mml.mml.compiler import MMLCompiler
from chuk_mcp_mml.models.event import Event
from chuk_mcp_mml.scheduler.adapters import ProcessCallback, SourceAdapter, select_adapter
from chuk_mcp_mml.scheduler.parts import Part, PartEntry

logger = logging.getLogger(__name__)


@dataclass
class MMLCallbacks:
    """
    User hooks fired during compilation and playback.

    start/stop fire once per sounding tone (never for rests) with the
    Event and the tone's chord position. ended fires when a part runs
    out of Events. error fires at most once per failing notation string.
    """

    start: Callable[[Event, int], Any] | None = None
    stop: Callable[[Event, int], Any] | None = None
    ended: Callable[[], Any] | None = None
    error: Callable[[ErrorKind, str], Any] | None = None


class MMLSequencer:
    """
    Compiles notation strings into parts and schedules their playback.

    Example:
        sequencer = MMLSequencer(MMLCallbacks(ended=on_ended))
        sequencer.prepare(synth, ["T120 O4 C4 D4 E4 F4", "T120 O3 C1"])
        sequencer.play_all()
        ...
        sequencer.halt()
    """

    def __init__(
        self,
        callbacks: MMLCallbacks | None = None,
        policy: ErrorPolicy = ErrorPolicy.ABORT,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """
        Initialize the sequencer.

        Args:
            callbacks: User hooks (all optional)
            policy: Batch error policy used by prepare()
            loop: Event loop for timers (default: the running loop at play time)
        """
        self.callbacks = callbacks or MMLCallbacks()
        self.compiler = MMLCompiler(policy)
        self._loop = loop
        self._adapter: SourceAdapter | None = None
        self._registry: dict[int, PartEntry] = {}
        self._idle = asyncio.Event()
        self._idle.set()

    def setup(self, callbacks: MMLCallbacks) -> MMLSequencer:
        """Replace the user hooks. Returns self for chaining."""
        self.callbacks = callbacks
        return self

    @property
    def policy(self) -> ErrorPolicy:
        return self.compiler.policy

    @property
    def adapter(self) -> SourceAdapter | None:
        """The adapter selected by the last prepare()."""
        return self._adapter

    @property
    def parts(self) -> Mapping[int, PartEntry]:
        """Read-only view of the registry."""
        return MappingProxyType(self._registry)

    def get(self, part_index: int) -> PartEntry:
        """
        Get the registry entry for a part.

        Raises:
            IndexError: If no part is installed at that index
        """
        try:
            return self._registry[part_index]
        except KeyError:
            raise IndexError(ErrorMessages.PART_NOT_FOUND.format(index=part_index)) from None

    def prepare(
        self,
        source: Any,
        notations: Sequence[str],
        shape: SourceShape | None = None,
    ) -> list[int]:
        """
        Compile notation strings into parts for a sound source.

        Any previously scheduled parts are halted and discarded first.
        The adapter for the source is chosen here, once.

        Args:
            source: The sound-source collaborator
            notations: One notation string per part
            shape: Force the adapter shape instead of detecting it

        Returns:
            Indices of the installed parts
        """
        self.halt()
        self._registry = {}
        self._adapter = select_adapter(source, shape)

        compiled = self.compiler.compile_batch(notations, self._report_error)
        for index, events in compiled.items():
            self._registry[index] = PartEntry(Part(events))

        logger.debug(f"Prepared {len(self._registry)} of {len(notations)} parts")
        return sorted(self._registry)

    def play(
        self,
        part_index: int,
        routing: Any = None,
        on_process: ProcessCallback | None = None,
    ) -> None:
        """
        Start (or continue) playback of one part.

        Args:
            part_index: Index returned by prepare()
            routing: Passed through to the adapter's start
            on_process: Passed through to the adapter's start/stop

        Raises:
            IndexError: If no part is installed at that index
            Exception: Whatever the source or start callback raises; the
                part stays scheduled and carries on with its next Event
        """
        entry = self.get(part_index)
        adapter = self._require_adapter()

        if entry.timer is not None:
            logger.debug(f"Part {part_index} is already playing")
            return

        event = entry.part.pop()
        if event is None:
            logger.debug(f"Part {part_index} ended")
            self._fire_ended()
            self._update_idle()
            return

        # Timer is armed before dispatch; a raising start never leaves the part unscheduled
        loop = self._loop or asyncio.get_running_loop()
        entry.last_event = event
        entry.timer = loop.call_later(
            event.duration, self._advance, part_index, entry, event, routing, on_process
        )
        self._idle.clear()

        adapter.start(event, routing, on_process)
        if self.callbacks.start is not None:
            for position, _, _ in event.tones():
                self.callbacks.start(event, position)

    def play_all(self, routing: Any = None, on_process: ProcessCallback | None = None) -> None:
        """Start every installed part."""
        for part_index in sorted(self._registry):
            self.play(part_index, routing, on_process)

    def halt(self, on_process: ProcessCallback | None = None) -> None:
        """
        Stop every playing part.

        Each playing part's timer is cancelled and its last popped Event
        is stopped. Parts that are not playing are left alone, so calling
        halt() again, or after playback finished, does nothing.
        """
        halted: list[PartEntry] = []
        for entry in self._registry.values():
            if entry.timer is None:
                continue
            entry.timer.cancel()
            entry.timer = None
            halted.append(entry)
        logger.debug(f"Halted {len(halted)} parts")
        self._update_idle()

        for entry in halted:
            if entry.last_event is not None and self._adapter is not None:
                self._stop_event(entry.last_event, on_process)

    def is_paused(self) -> bool:
        """True iff no part has a pending timer."""
        return all(entry.timer is None for entry in self._registry.values())

    async def wait_idle(self) -> None:
        """Wait until every part has ended or been halted."""
        await self._idle.wait()

    def _advance(
        self,
        part_index: int,
        entry: PartEntry,
        event: Event,
        routing: Any,
        on_process: ProcessCallback | None,
    ) -> None:
        """Timer callback: stop the finished Event and play the next one."""
        if self._registry.get(part_index) is not entry or entry.timer is None:
            return

        entry.timer = None
        try:
            self._stop_event(event, on_process)
        finally:
            self.play(part_index, routing, on_process)

    def _stop_event(self, event: Event, on_process: ProcessCallback | None) -> None:
        self._require_adapter().stop(event, on_process)
        if self.callbacks.stop is not None:
            for position, _, _ in event.tones():
                self.callbacks.stop(event, position)

    def _fire_ended(self) -> None:
        if self.callbacks.ended is not None:
            self.callbacks.ended()

    def _report_error(self, kind: ErrorKind, token: str) -> None:
        if self.callbacks.error is not None:
            self.callbacks.error(kind, token)

    def _require_adapter(self) -> SourceAdapter:
        if self._adapter is None:
            raise RuntimeError("No sound source prepared. Call prepare() first.")
        return self._adapter

    def _update_idle(self) -> None:
        if self.is_paused():
            self._idle.set()
