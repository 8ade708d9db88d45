#!/usr/bin/env python3
"""
Example: Drive the sequencer with printing tone generators.

No audio is produced; each generator prints when it is retuned,
started and stopped, so the timing of both parts can be followed.

Usage:
    python examples/play_mml.py
"""

import asyncio
import time

from chuk_mcp_mml import ErrorKind, Event, MMLCallbacks, MMLSequencer
from chuk_mcp_mml.core import spell


class PrintingGenerator:
    """A ToneGenerator that logs instead of sounding."""

    def __init__(self, name: str, clock: float):
        self.name = name
        self.clock = clock
        self.frequency = 0.0

    def set_frequency(self, frequency: float, detune: float = 0.0) -> None:
        self.frequency = frequency

    def start(self) -> None:
        print(f"{time.monotonic() - self.clock:6.3f}s  {self.name} on  {self.frequency:8.2f} Hz")

    def stop(self) -> None:
        print(f"{time.monotonic() - self.clock:6.3f}s  {self.name} off")


async def main() -> None:
    clock = time.monotonic()
    generators = [PrintingGenerator(f"gen{i}", clock) for i in range(3)]

    def on_start(event: Event, position: int) -> None:
        print(f"         start {spell(event.indices[position])}")

    def on_error(kind: ErrorKind, token: str) -> None:
        print(f"error {kind.value}: {token!r}")

    sequencer = MMLSequencer(
        MMLCallbacks(start=on_start, ended=lambda: print("         part ended"), error=on_error)
    )
    sequencer.prepare(generators, ["T240 O4 CEG4 R8 C8 D8 E8 F2"])
    sequencer.play_all()
    await sequencer.wait_idle()

    sequencer.halt()  # already idle: nothing happens


if __name__ == "__main__":
    asyncio.run(main())
