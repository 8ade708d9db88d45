"""
Async MML MCP Server using chuk-mcp-server

This server provides MCP tools for working with Music Macro Language.

The server provides tools for:
- Compiling MML strings to timed note/chord events
- Validating MML strings and reporting TEMPO/OCTAVE/NOTE errors
- Exporting and importing notation as portable Base64 payloads
- Managing songs (named batches of parts) on disk
- Compiling songs to MIDI files
"""

import logging

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_mml.config import MMLConfig
from chuk_mcp_mml.songs import SongManager
from chuk_mcp_mml.tools import (
    register_compilation_tools,
    register_mml_tools,
    register_song_tools,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "chuk-mcp-mml"


def create_server(config: MMLConfig) -> ChukMCPServer:
    """
    Build the MCP server with every MML tool registered.

    Args:
        config: Error policy, MIDI settings and storage directories

    Returns:
        A ChukMCPServer ready for run_stdio() or run_http()
    """
    mcp = ChukMCPServer(SERVER_NAME)
    song_manager = SongManager(config.songs_dir)

    tools = {
        **register_mml_tools(mcp, config),
        **register_song_tools(mcp, song_manager),
        **register_compilation_tools(mcp, song_manager, config),
    }

    logger.info(f"CHUK MML MCP Server initialized with {len(tools)} tools")
    logger.info(f"  Error policy: {config.error_policy.value}")
    logger.info(f"  Songs dir: {config.songs_dir}")
    logger.info(f"  Output dir: {config.output_dir}")
    return mcp
