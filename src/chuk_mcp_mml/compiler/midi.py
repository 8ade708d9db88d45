"""
MIDI export - compiled parts to a Standard MIDI File.

This module converts Events (seconds on each part's timeline) to a mido
MidiFile. Tempo changes inside an MML string are already baked into the
Event times, so the file uses one fixed reference tempo and converts
seconds to ticks against it. All operations are deterministic: same
input → same output.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from mido import Message, MetaMessage, MidiFile, MidiTrack

from chuk_mcp_mml.core import index_to_midi
from chuk_mcp_mml.models.event import Event

# Standard ticks per beat (quarter note) - industry standard
TICKS_PER_BEAT = 480

# Tempo the tick grid is laid on
REFERENCE_BPM = 120

# GM Drum channel (0-indexed, so 9 = channel 10) - never assigned to a part
DRUM_CHANNEL = 9

DEFAULT_VELOCITY = 100

_MELODIC_CHANNELS = [channel for channel in range(16) if channel != DRUM_CHANNEL]


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI note event.

    This is the lowest-level representation before writing to MIDI.
    All times are in ticks (absolute from start of track).
    """

    pitch: int  # MIDI note number (0-127)
    start_ticks: int  # Absolute start time in ticks
    duration_ticks: int  # Duration in ticks
    velocity: int  # 0-127
    channel: int = 0  # 0-15

    def __post_init__(self) -> None:
        """Validate MIDI ranges."""
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if not 0 <= self.channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")


def seconds_to_ticks(
    seconds: float,
    ticks_per_beat: int = TICKS_PER_BEAT,
    reference_bpm: int = REFERENCE_BPM,
) -> int:
    """Convert a time in seconds to ticks at the reference tempo."""
    return round(seconds * ticks_per_beat * reference_bpm / 60)


def channel_for_part(part_index: int) -> int:
    """Channel for a part, skipping the GM drum channel and wrapping after 15."""
    return _MELODIC_CHANNELS[part_index % len(_MELODIC_CHANNELS)]


def part_to_midi_events(
    events: Sequence[Event],
    channel: int = 0,
    velocity: int = DEFAULT_VELOCITY,
    ticks_per_beat: int = TICKS_PER_BEAT,
    reference_bpm: int = REFERENCE_BPM,
) -> list[MidiEvent]:
    """
    Convert one part's Events to MidiEvents.

    Every sounding tone of a chord becomes its own note; rests produce
    nothing but still occupy their time through the Event offsets.

    Raises:
        ValueError: If a tone falls outside the MIDI note range
    """
    midi_events: list[MidiEvent] = []
    for event in events:
        start = seconds_to_ticks(event.start, ticks_per_beat, reference_bpm)
        end = seconds_to_ticks(event.stop, ticks_per_beat, reference_bpm)
        for _, index, _ in event.tones():
            midi_events.append(
                MidiEvent(
                    pitch=index_to_midi(index),
                    start_ticks=start,
                    duration_ticks=end - start,
                    velocity=velocity,
                    channel=channel,
                )
            )
    return midi_events


def events_to_midi(
    events: Sequence[MidiEvent],
    tempo_bpm: int = REFERENCE_BPM,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Convert a sequence of MidiEvents to a MidiFile.

    Args:
        events: Sequence of MidiEvent objects
        tempo_bpm: Tempo in beats per minute
        ticks_per_beat: Resolution (default 480)

    Returns:
        A mido MidiFile ready to be saved

    This function is deterministic: same events → same MIDI file.
    """
    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    # Set tempo (microseconds per beat)
    tempo_us = int(60_000_000 / tempo_bpm)
    track.append(MetaMessage("set_tempo", tempo=tempo_us, time=0))

    messages: list[tuple[int, Message]] = []

    for event in events:
        messages.append(
            (
                event.start_ticks,
                Message(
                    "note_on",
                    channel=event.channel,
                    note=event.pitch,
                    velocity=event.velocity,
                    time=0,  # Will be converted to delta
                ),
            )
        )
        messages.append(
            (
                event.start_ticks + event.duration_ticks,
                Message(
                    "note_off",
                    channel=event.channel,
                    note=event.pitch,
                    velocity=0,
                    time=0,  # Will be converted to delta
                ),
            )
        )

    # note_off before note_on at the same tick, so repeated pitches retrigger cleanly
    messages.sort(key=lambda x: (x[0], x[1].type != "note_off"))

    current_time = 0
    for abs_time, msg in messages:
        msg.time = abs_time - current_time
        track.append(msg)
        current_time = abs_time

    track.append(MetaMessage("end_of_track", time=0))

    return mid


def parts_to_midi(
    parts: Mapping[int, Sequence[Event]],
    ticks_per_beat: int = TICKS_PER_BEAT,
    reference_bpm: int = REFERENCE_BPM,
    velocity: int = DEFAULT_VELOCITY,
) -> MidiFile:
    """
    Convert compiled parts to a MidiFile, one channel per part.

    Args:
        parts: Part index → Events (as returned by compile_batch)
        ticks_per_beat: MIDI resolution
        reference_bpm: Tempo the tick grid is laid on
        velocity: Velocity for every note

    Returns:
        A mido MidiFile ready to be saved

    Example:
        parts = compile_batch(["T120 O4 C4 D4 E4 F4", "T120 O3 C1"])
        parts_to_midi(parts).save("song.mid")
    """
    midi_events: list[MidiEvent] = []
    for part_index in sorted(parts):
        midi_events.extend(
            part_to_midi_events(
                parts[part_index],
                channel=channel_for_part(part_index),
                velocity=velocity,
                ticks_per_beat=ticks_per_beat,
                reference_bpm=reference_bpm,
            )
        )
    return events_to_midi(midi_events, tempo_bpm=reference_bpm, ticks_per_beat=ticks_per_beat)
