"""
Song management - named batches of MML parts on disk.
"""

from chuk_mcp_mml.songs.manager import SongManager, SongMetadata

__all__ = [
    "SongManager",
    "SongMetadata",
]
