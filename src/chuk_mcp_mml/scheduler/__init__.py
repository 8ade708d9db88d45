"""
Playback scheduling - compiled parts to sound-source calls over time.

This module provides:
- MMLSequencer: prepare/play/halt over independent per-part timelines
- MMLCallbacks: start/stop/ended/error user hooks
- Part, PartEntry: the part store and registry entries
- Source adapters for raw generators, multi-pitch and indexed-trigger modules
"""

from chuk_mcp_mml.scheduler.adapters import (
    IndexedTriggerAdapter,
    IndexedTriggerSource,
    MultiPitchAdapter,
    MultiPitchSource,
    RawGeneratorAdapter,
    SourceAdapter,
    ToneGenerator,
    detect_shape,
    select_adapter,
)
from chuk_mcp_mml.scheduler.parts import Part, PartEntry, PartState
from chuk_mcp_mml.scheduler.sequencer import MMLCallbacks, MMLSequencer

__all__ = [
    # Sequencer
    "MMLCallbacks",
    "MMLSequencer",
    # Parts
    "Part",
    "PartEntry",
    "PartState",
    # Adapters
    "IndexedTriggerAdapter",
    "IndexedTriggerSource",
    "MultiPitchAdapter",
    "MultiPitchSource",
    "RawGeneratorAdapter",
    "SourceAdapter",
    "ToneGenerator",
    "detect_shape",
    "select_adapter",
]
