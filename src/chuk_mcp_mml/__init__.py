"""
chuk-mcp-mml - Music Macro Language compiler and multi-part sequencer.

The pipeline:
    MML string → tokenize() → MMLCompiler → Events
    → MMLSequencer parts → sound-source adapter (start/stop over time)

Side outputs: ScoreIR (JSON), MIDI files, and export payloads.
"""

from chuk_mcp_mml.constants import REST, ErrorKind, ErrorPolicy, SourceShape
from chuk_mcp_mml.export import export_mml, import_mml
from chuk_mcp_mml.mml import MMLCompiler, MMLError, compile_batch, compile_mml, tokenize
from chuk_mcp_mml.models import Event, Song
from chuk_mcp_mml.scheduler import MMLCallbacks, MMLSequencer

__version__ = "0.1.0"

__all__ = [
    "REST",
    "ErrorKind",
    "ErrorPolicy",
    "Event",
    "MMLCallbacks",
    "MMLCompiler",
    "MMLError",
    "MMLSequencer",
    "Song",
    "SourceShape",
    "compile_batch",
    "compile_mml",
    "export_mml",
    "import_mml",
    "tokenize",
]
