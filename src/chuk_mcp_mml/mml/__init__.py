"""
MML front end - notation string to Events.

The pipeline:
    notation string → tokenize() → Directives
    → MMLCompiler (CompilationState threaded left to right)
    → Events (indices, frequencies, start, duration, stop)
"""

from chuk_mcp_mml.mml.compiler import (
    CompilationState,
    MMLCompiler,
    compile_batch,
    compile_mml,
)
from chuk_mcp_mml.mml.errors import MMLError
from chuk_mcp_mml.mml.tokenizer import (
    Directive,
    NoteDirective,
    OctaveDirective,
    TempoDirective,
    tokenize,
)

__all__ = [
    # Tokenizer
    "Directive",
    "NoteDirective",
    "OctaveDirective",
    "TempoDirective",
    "tokenize",
    # Compiler
    "CompilationState",
    "MMLCompiler",
    "MMLError",
    "compile_batch",
    "compile_mml",
]
