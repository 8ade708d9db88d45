"""
Song tools - MCP tools for song lifecycle.

Tools for creating, managing, and querying songs.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_mml.constants import ErrorMessages, SuccessMessages
from chuk_mcp_mml.songs import SongManager

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_song_tools(
    mcp: ChukMCPServer,
    manager: SongManager,
) -> dict[str, Any]:
    """
    Register song lifecycle tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The song manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def _not_found(name: str) -> str:
        return json.dumps(
            {"status": "error", "message": ErrorMessages.SONG_NOT_FOUND.format(name=name)}
        )

    @mcp.tool  # type: ignore[arg-type]
    async def mml_create_song(
        name: str,
        parts: list[str] | None = None,
        description: str = "",
    ) -> str:
        """
        Create a new song.

        A song is a named list of MML strings, one per part.

        Args:
            name: Unique name for the song
            parts: Optional initial MML strings
            description: Optional description

        Returns:
            JSON string with song details

        Example:
            mml_create_song(name="scale", parts=["T120 O4 C4 D4 E4 F4 G4 A4 B4"])
        """
        try:
            song = await manager.create(name=name, parts=parts, description=description)
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.SONG_CREATED.format(name=song.name),
                    "song": {"name": song.name, "parts": song.parts},
                }
            )
        except Exception as e:
            logger.exception("Failed to create song")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_create_song"] = mml_create_song

    @mcp.tool  # type: ignore[arg-type]
    async def mml_get_song(name: str) -> str:
        """
        Get a song's parts and metadata.

        Args:
            name: Song name

        Returns:
            JSON string with the song
        """
        try:
            song = await manager.get(name)
            if song is None:
                return _not_found(name)
            return json.dumps({"status": "success", "song": song.to_yaml_dict()})
        except Exception as e:
            logger.exception("Failed to get song")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_get_song"] = mml_get_song

    @mcp.tool  # type: ignore[arg-type]
    async def mml_list_songs() -> str:
        """
        List saved songs.

        Returns:
            JSON string with song names and part counts
        """
        try:
            songs = await manager.list_songs()
            return json.dumps(
                {
                    "status": "success",
                    "songs": [
                        {
                            "name": meta.name,
                            "parts": meta.part_count,
                            "description": meta.description,
                        }
                        for meta in songs
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to list songs")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_list_songs"] = mml_list_songs

    @mcp.tool  # type: ignore[arg-type]
    async def mml_save_song(name: str) -> str:
        """
        Save a song to disk as YAML.

        Args:
            name: Song name

        Returns:
            JSON string with the saved path
        """
        try:
            song = await manager.get(name)
            if song is None:
                return _not_found(name)
            path = await manager.save(song)
            return json.dumps({"status": "success", "path": str(path)})
        except Exception as e:
            logger.exception("Failed to save song")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_save_song"] = mml_save_song

    @mcp.tool  # type: ignore[arg-type]
    async def mml_delete_song(name: str) -> str:
        """
        Delete a song.

        Args:
            name: Song name

        Returns:
            JSON string with the result
        """
        try:
            if not await manager.delete(name):
                return _not_found(name)
            return json.dumps({"status": "success", "deleted": name})
        except Exception as e:
            logger.exception("Failed to delete song")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_delete_song"] = mml_delete_song

    @mcp.tool  # type: ignore[arg-type]
    async def mml_add_part(name: str, notation: str) -> str:
        """
        Append an MML part to a song.

        Args:
            name: Song name
            notation: MML string for the new part

        Returns:
            JSON string with the new part index

        Example:
            mml_add_part(name="scale", notation="T120 O3 C1")
        """
        try:
            song, index = await manager.add_part(name, notation)
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.PART_ADDED.format(index=index, name=song.name),
                    "index": index,
                }
            )
        except ValueError as e:
            return json.dumps({"status": "error", "message": str(e)})
        except Exception as e:
            logger.exception("Failed to add part")
            return json.dumps({"status": "error", "message": str(e)})

    tools["mml_add_part"] = mml_add_part

    return tools
