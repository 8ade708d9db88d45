"""
Compilation tools - MCP tools for MIDI export.

Tools for compiling songs to MIDI files.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_mml.compiler import ScoreIR, parts_to_midi
from chuk_mcp_mml.constants import ErrorKind, ErrorMessages, SuccessMessages
from chuk_mcp_mml.mml import MMLCompiler
from chuk_mcp_mml.songs import SongManager

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

    from chuk_mcp_mml.config import MMLConfig

logger = logging.getLogger(__name__)


def register_compilation_tools(
    mcp: ChukMCPServer,
    manager: SongManager,
    config: MMLConfig,
) -> dict[str, Any]:
    """
    Register compilation/export tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The song manager
        config: Shared configuration (policy, MIDI settings, output directory)

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def mml_compile_midi(song: str, output_name: str | None = None) -> str:
        """
        Compile a song to a MIDI file.

        Each part becomes its own MIDI channel. Parts that fail to compile
        are reported; under the 'abort' policy nothing is written.

        Args:
            song: Song name
            output_name: Optional output filename (without .mid extension)

        Returns:
            JSON string with compilation result and file path

        Example:
            mml_compile_midi(song="scale")
        """
        try:
            current = await manager.get(song)
            if current is None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.SONG_NOT_FOUND.format(name=song)}
                )

            errors: list[dict[str, str]] = []

            def on_error(kind: ErrorKind, token: str) -> None:
                errors.append({"kind": kind.value, "token": token})

            compiled = MMLCompiler(config.error_policy).compile_batch(current.parts, on_error)
            if not compiled:
                return json.dumps(
                    {"status": "error", "message": "Nothing compiled", "errors": errors}
                )

            score = ScoreIR.from_compiled(current.parts, compiled, name=current.name)
            midi = parts_to_midi(
                compiled,
                ticks_per_beat=config.ticks_per_beat,
                reference_bpm=config.midi_reference_bpm,
            )

            output_path = config.output_dir / f"{output_name or current.name}.mid"
            config.output_dir.mkdir(parents=True, exist_ok=True)
            midi.save(str(output_path))

            return json.dumps(
                {
                    "status": "success",
                    "path": str(output_path),
                    "compilation": score.summary(),
                    "errors": errors,
                    "message": SuccessMessages.SONG_COMPILED.format(
                        name=current.name, path=output_path
                    ),
                }
            )
        except Exception as e:
            logger.exception("Failed to compile MIDI")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_compile_midi"] = mml_compile_midi

    return tools
