"""
Output stages for compiled MML parts.

The pipeline:
    notation strings → compile_batch() → part index → Events
    → ScoreIR (inspectable JSON)
    → MIDI File
"""

from chuk_mcp_mml.compiler.midi import (
    DRUM_CHANNEL,
    REFERENCE_BPM,
    TICKS_PER_BEAT,
    MidiEvent,
    channel_for_part,
    events_to_midi,
    part_to_midi_events,
    parts_to_midi,
    seconds_to_ticks,
)
from chuk_mcp_mml.compiler.score_ir import SCHEMA_VERSION, IRPart, ScoreIR

__all__ = [
    # MIDI
    "DRUM_CHANNEL",
    "REFERENCE_BPM",
    "TICKS_PER_BEAT",
    "MidiEvent",
    "channel_for_part",
    "events_to_midi",
    "part_to_midi_events",
    "parts_to_midi",
    "seconds_to_ticks",
    # Score IR
    "SCHEMA_VERSION",
    "IRPart",
    "ScoreIR",
]
