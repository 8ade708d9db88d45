"""
MCP tool implementations.

Tools are organized by domain:
- mml - Compile, validate, export and import notation
- songs - Song lifecycle
- compilation - MIDI export tools
"""

from chuk_mcp_mml.tools.compilation import register_compilation_tools
from chuk_mcp_mml.tools.mml import register_mml_tools
from chuk_mcp_mml.tools.songs import register_song_tools

__all__ = [
    "register_compilation_tools",
    "register_mml_tools",
    "register_song_tools",
]
