"""
Tests for the MML sequencer.

Playback runs on the real event loop at high tempos (T6000 makes a
quarter note last 10ms) so the tests stay fast.
"""

import asyncio
import inspect
import warnings

import pytest

from chuk_mcp_mml import ErrorKind, ErrorPolicy, Event, MMLCallbacks, MMLSequencer
from chuk_mcp_mml.constants import SourceShape
from chuk_mcp_mml.scheduler import MultiPitchAdapter, PartState, RawGeneratorAdapter
from chuk_mcp_mml.scheduler import sequencer as sequencer_module

TIMEOUT = 2.0


class Recorder:
    """Collects callback invocations."""

    def __init__(self) -> None:
        self.starts: list[tuple[Event, int]] = []
        self.stops: list[tuple[Event, int]] = []
        self.ended = 0
        self.errors: list[tuple[ErrorKind, str]] = []

    def callbacks(self) -> MMLCallbacks:
        return MMLCallbacks(
            start=lambda event, position: self.starts.append((event, position)),
            stop=lambda event, position: self.stops.append((event, position)),
            ended=self._on_ended,
            error=lambda kind, token: self.errors.append((kind, token)),
        )

    def _on_ended(self) -> None:
        self.ended += 1


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


class TestPrepare:
    """Tests for prepare()."""

    def test_installs_parts(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        assert sequencer.prepare(generators, ["T120 O4 C4", "T120 O3 C1"]) == [0, 1]
        assert len(sequencer.get(0).part) == 1
        assert sequencer.get(1).state == PartState.IDLE
        assert isinstance(sequencer.adapter, RawGeneratorAdapter)

    def test_error_aborts_batch(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        assert sequencer.prepare(generators, ["T120 O4 C4", "T120 O4 C5"]) == []
        assert recorder.errors == [(ErrorKind.NOTE, "C5")]
        assert dict(sequencer.parts) == {}

    def test_error_continue(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks(), policy=ErrorPolicy.CONTINUE)
        assert sequencer.prepare(generators, ["O4 C4", "T120 O4 C4"]) == [1]
        assert recorder.errors == [(ErrorKind.TEMPO, "C4")]
        with pytest.raises(IndexError, match="No part at index 0"):
            sequencer.get(0)

    def test_shape_override(self, multi_pitch) -> None:
        sequencer = MMLSequencer()
        sequencer.prepare(multi_pitch, ["T120 O4 C4"], shape=SourceShape.MULTI_PITCH)
        assert isinstance(sequencer.adapter, MultiPitchAdapter)

    def test_unknown_index(self) -> None:
        with pytest.raises(IndexError):
            MMLSequencer().get(3)

    def test_setup_replaces_callbacks(self, recorder: Recorder) -> None:
        sequencer = MMLSequencer()
        callbacks = recorder.callbacks()
        assert sequencer.setup(callbacks) is sequencer
        assert sequencer.callbacks is callbacks


class TestPlayback:
    """Tests for play() and play_all()."""

    @pytest.mark.asyncio
    async def test_plays_in_order(self, generators, recorder: Recorder) -> None:
        """Each event is retuned, started, then stopped before the next."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 C4 D4"])
        sequencer.play(0)
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        log = generators[0].log
        assert [entry[0] for entry in log] == [
            "set_frequency",
            "start",
            "stop",
            "set_frequency",
            "start",
            "stop",
        ]
        assert log[0][2] == pytest.approx(261.63, abs=0.01)
        assert recorder.ended == 1
        assert sequencer.is_paused()

    @pytest.mark.asyncio
    async def test_chord_positions(self, generators, recorder: Recorder) -> None:
        """Chord position i plays on generator i."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 CEG4"])
        sequencer.play_all()
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        started = [entry[1] for entry in generators[0].log if entry[0] == "start"]
        assert started == ["gen0", "gen1", "gen2"]
        assert [position for _, position in recorder.starts] == [0, 1, 2]
        assert [position for _, position in recorder.stops] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_rests_are_silent(self, generators, recorder: Recorder) -> None:
        """Rests take time but fire no start/stop."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 R4 C4"])
        sequencer.play(0)
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        assert len(recorder.starts) == 1
        assert recorder.starts[0][0].indices == (39,)
        assert len(recorder.stops) == 1
        assert recorder.ended == 1

    @pytest.mark.asyncio
    async def test_parts_are_independent(self, generators, recorder: Recorder) -> None:
        """ended fires once per part."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 C4 D4 E4", "T6000 O3 C8"])
        sequencer.play_all()
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        assert recorder.ended == 2
        assert len(recorder.starts) == 4

    @pytest.mark.asyncio
    async def test_play_while_playing_is_ignored(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 C4"])
        sequencer.play(0)
        sequencer.play(0)
        assert len(recorder.starts) == 1
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)
        assert recorder.ended == 1

    @pytest.mark.asyncio
    async def test_empty_part_ends_immediately(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T120 O4"])
        sequencer.play(0)
        assert recorder.ended == 1
        assert sequencer.is_paused()

    @pytest.mark.asyncio
    async def test_multi_pitch_source(self, multi_pitch) -> None:
        sequencer = MMLSequencer()
        sequencer.prepare(multi_pitch, ["T6000 O4 C4 R4"])
        sequencer.play(0, routing="bus1")
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        assert multi_pitch.log[0][0] == "start"
        assert multi_pitch.log[0][1][0] == pytest.approx(261.63, abs=0.01)
        assert multi_pitch.log[0][2] == "bus1"
        assert multi_pitch.log[2] == ("start", [0.0], "bus1")

    @pytest.mark.asyncio
    async def test_indexed_trigger_source(self, trigger) -> None:
        sequencer = MMLSequencer()
        sequencer.prepare(trigger, ["T6000 O4 CE4"])
        sequencer.play(0)
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        assert trigger.log == [
            ("start", 39, None),
            ("start", 31, None),
            ("stop", 39),
            ("stop", 31),
        ]

    @pytest.mark.asyncio
    async def test_wait_idle_when_nothing_playing(self) -> None:
        await asyncio.wait_for(MMLSequencer().wait_idle(), TIMEOUT)


class TestHalt:
    """Tests for halt() and is_paused()."""

    @pytest.mark.asyncio
    async def test_halt_stops_sounding_event(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T60 O4 C1 D1"])
        sequencer.play(0)
        assert not sequencer.is_paused()
        assert sequencer.get(0).is_playing

        sequencer.halt()
        assert sequencer.is_paused()
        assert not generators[0].sounding
        assert len(recorder.stops) == 1
        assert recorder.stops[0][0].indices == (39,)
        assert recorder.ended == 0

    @pytest.mark.asyncio
    async def test_halt_is_idempotent(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T60 O4 C1"])
        sequencer.play(0)

        sequencer.halt()
        sequencer.halt()
        assert len(recorder.stops) == 1

    @pytest.mark.asyncio
    async def test_no_callbacks_after_halt(self, generators, recorder: Recorder) -> None:
        """A cancelled timer never advances the part."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 C4 D4 E4"])
        sequencer.play(0)
        sequencer.halt()

        await asyncio.sleep(0.1)
        assert len(recorder.starts) == 1
        assert len(recorder.stops) == 1
        assert recorder.ended == 0

    @pytest.mark.asyncio
    async def test_halt_releases_wait_idle(self, generators) -> None:
        sequencer = MMLSequencer()
        sequencer.prepare(generators, ["T60 O4 C1"])
        sequencer.play(0)

        waiter = asyncio.create_task(sequencer.wait_idle())
        await asyncio.sleep(0)
        assert not waiter.done()

        sequencer.halt()
        await asyncio.wait_for(waiter, TIMEOUT)

    def test_halt_before_prepare(self) -> None:
        sequencer = MMLSequencer()
        sequencer.halt()
        assert sequencer.is_paused()

    @pytest.mark.asyncio
    async def test_halt_after_end_does_nothing(self, generators, recorder: Recorder) -> None:
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T6000 O4 C4"])
        sequencer.play(0)
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        sequencer.halt()
        assert len(recorder.stops) == 1

    @pytest.mark.asyncio
    async def test_prepare_discards_previous_parts(self, generators, recorder: Recorder) -> None:
        """Re-preparing halts whatever was playing."""
        sequencer = MMLSequencer(recorder.callbacks())
        sequencer.prepare(generators, ["T60 O4 C1", "T60 O4 E1"])
        sequencer.play_all()

        assert sequencer.prepare(generators, ["T6000 O5 C4"]) == [0]
        assert len(recorder.stops) == 2
        assert sequencer.is_paused()

        await asyncio.sleep(0.05)
        assert recorder.ended == 0


class TestRaisingCallbacks:
    """A raising source or callback never stalls a part's timeline."""

    @pytest.mark.asyncio
    async def test_raising_stop_callback(self, generators) -> None:
        """Playback carries on to the end and the error reaches the loop."""
        reported: list[dict] = []
        asyncio.get_running_loop().set_exception_handler(lambda _, ctx: reported.append(ctx))
        starts: list[Event] = []
        ended: list[bool] = []

        def boom(event: Event, position: int) -> None:
            raise RuntimeError("stop failed")

        sequencer = MMLSequencer(
            MMLCallbacks(
                start=lambda event, position: starts.append(event),
                stop=boom,
                ended=lambda: ended.append(True),
            )
        )
        sequencer.prepare(generators, ["T6000 O4 C4 D4"])
        sequencer.play(0)
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)

        assert [event.indices for event in starts] == [(39,), (41,)]
        assert ended == [True]
        assert sequencer.is_paused()
        assert sequencer.get(0).part.remaining == 0
        assert [type(ctx["exception"]) for ctx in reported] == [RuntimeError, RuntimeError]

    @pytest.mark.asyncio
    async def test_raising_start_callback(self, generators) -> None:
        """play() raises, but the part is already scheduled and finishes."""
        asyncio.get_running_loop().set_exception_handler(lambda _, ctx: None)
        ended: list[bool] = []

        def boom(event: Event, position: int) -> None:
            raise RuntimeError("start failed")

        sequencer = MMLSequencer(MMLCallbacks(start=boom, ended=lambda: ended.append(True)))
        sequencer.prepare(generators, ["T6000 O4 C4 D4"])
        with pytest.raises(RuntimeError, match="start failed"):
            sequencer.play(0)

        assert sequencer.get(0).is_playing
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)
        assert ended == [True]

    @pytest.mark.asyncio
    async def test_halt_with_raising_stop_callback(self, generators) -> None:
        """Every timer is cancelled even when stopping an Event raises."""

        def boom(event: Event, position: int) -> None:
            raise RuntimeError("stop failed")

        sequencer = MMLSequencer(MMLCallbacks(stop=boom))
        sequencer.prepare(generators, ["T60 O4 C1", "T60 O3 C1"])
        sequencer.play_all()

        with pytest.raises(RuntimeError):
            sequencer.halt()
        assert sequencer.is_paused()
        await asyncio.wait_for(sequencer.wait_idle(), TIMEOUT)


def test_module_source_compiles_cleanly() -> None:
    """Docstrings carry no invalid escape sequences."""
    source = inspect.getsource(sequencer_module)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, sequencer_module.__file__, "exec")
