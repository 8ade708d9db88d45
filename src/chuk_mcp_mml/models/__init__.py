"""
Models for the MML system.

This module provides:
- Event: One compiled note, chord or rest on a part's timeline
- Song: A named, persistable batch of notation strings
"""

from chuk_mcp_mml.models.event import Event
from chuk_mcp_mml.models.song import Song

__all__ = [
    "Event",
    "Song",
]
