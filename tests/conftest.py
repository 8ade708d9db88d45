"""
Pytest configuration and shared fixtures.
"""

import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest

from chuk_mcp_mml.scheduler import IndexedTriggerSource, MultiPitchSource


class RecordingGenerator:
    """Tone generator that records every call it receives."""

    def __init__(self, name: str = "gen", log: list[tuple[Any, ...]] | None = None):
        self.name = name
        self.log = log if log is not None else []
        self.frequency = 0.0
        self.detune = 0.0
        self.sounding = False

    def set_frequency(self, frequency: float, detune: float = 0.0) -> None:
        self.frequency = frequency
        self.detune = detune
        self.log.append(("set_frequency", self.name, frequency))

    def start(self) -> None:
        self.sounding = True
        self.log.append(("start", self.name))

    def stop(self) -> None:
        self.sounding = False
        self.log.append(("stop", self.name))


class RecordingMultiPitch(MultiPitchSource):
    """Multi-pitch module that records chords it is asked to sound."""

    def __init__(self) -> None:
        self.log: list[tuple[Any, ...]] = []

    def start(self, frequencies: Sequence[float], routing: Any = None, on_process: Any = None):
        self.log.append(("start", list(frequencies), routing))

    def stop(self, frequencies: Sequence[float], on_process: Any = None):
        self.log.append(("stop", list(frequencies)))


class RecordingTrigger(IndexedTriggerSource):
    """Indexed-trigger module that records the indices it is given."""

    def __init__(self) -> None:
        self.log: list[tuple[Any, ...]] = []

    def start(self, index: int, routing: Any = None, on_process: Any = None):
        self.log.append(("start", index, routing))

    def stop(self, index: int, on_process: Any = None):
        self.log.append(("stop", index))


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def generators() -> list[RecordingGenerator]:
    """Four recording generators sharing one call log."""
    log: list[tuple[Any, ...]] = []
    return [RecordingGenerator(f"gen{i}", log) for i in range(4)]


@pytest.fixture
def multi_pitch() -> RecordingMultiPitch:
    return RecordingMultiPitch()


@pytest.fixture
def trigger() -> RecordingTrigger:
    return RecordingTrigger()
