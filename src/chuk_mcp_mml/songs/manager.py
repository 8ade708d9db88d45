"""
Song Manager - handles song lifecycle.

Provides async operations for creating, loading, saving, and listing
songs stored as YAML files.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

import yaml

from chuk_mcp_mml.constants import ErrorMessages
from chuk_mcp_mml.models.song import Song

logger = logging.getLogger(__name__)


class SongMetadata:
    """Lightweight metadata for listing songs."""

    def __init__(
        self,
        name: str,
        path: Path,
        part_count: int,
        description: str,
        modified: datetime,
    ):
        self.name = name
        self.path = path
        self.part_count = part_count
        self.description = description
        self.modified = modified

    def __repr__(self) -> str:
        return f"SongMetadata({self.name!r}, {self.part_count} parts)"


class SongManager:
    """
    Manages song lifecycle with file persistence.

    Provides methods to create, load, save, and list songs.
    All I/O operations are async-ready.
    """

    def __init__(self, songs_dir: Path):
        """
        Initialize the manager.

        Args:
            songs_dir: Directory for storing song files
        """
        self.songs_dir = songs_dir
        self._cache: dict[str, Song] = {}

    async def create(
        self,
        name: str,
        parts: list[str] | None = None,
        description: str = "",
    ) -> Song:
        """
        Create a new song (in memory until saved).

        Args:
            name: Song name
            parts: Initial notation strings, one per part
            description: Free-form description

        Returns:
            The created Song
        """
        song = Song(name=name, parts=list(parts or []), description=description)
        self._cache[name] = song
        return song

    async def get(self, name: str) -> Song | None:
        """
        Get a song by name.

        Checks cache first, then loads from file if not cached.

        Returns:
            The Song or None if not found
        """
        if name in self._cache:
            return self._cache[name]

        path = self._get_path(name)
        if path.exists():
            return await self.load(path)

        return None

    async def save(self, song: Song) -> Path:
        """
        Save a song to disk.

        Returns:
            Path to the saved file
        """
        self.songs_dir.mkdir(parents=True, exist_ok=True)

        song.modified = datetime.now(UTC)

        path = self._get_path(song.name)
        with open(path, "w") as f:
            yaml.safe_dump(song.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)

        self._cache[song.name] = song
        logger.debug(f"Saved song '{song.name}' to {path}")
        return path

    async def load(self, path: Path) -> Song:
        """
        Load a song from a file.

        Args:
            path: Path to the song file

        Returns:
            The loaded Song
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        song = Song.from_yaml_dict(data)
        self._cache[song.name] = song
        return song

    async def list_songs(self) -> list[SongMetadata]:
        """
        List all songs in the directory, most recently modified first.
        """
        if not self.songs_dir.exists():
            return []

        result = []
        for path in self.songs_dir.glob("*.song.yaml"):
            try:
                with open(path) as f:
                    data = yaml.safe_load(f)

                result.append(
                    SongMetadata(
                        name=data.get("name", path.stem),
                        path=path,
                        part_count=len(data.get("parts", [])),
                        description=data.get("description", ""),
                        modified=datetime.fromtimestamp(path.stat().st_mtime),
                    )
                )
            except (OSError, yaml.YAMLError, AttributeError) as e:
                logger.warning(f"Skipping unreadable song file {path}: {e}")
                continue

        return sorted(result, key=lambda m: m.modified, reverse=True)

    async def delete(self, name: str) -> bool:
        """
        Delete a song.

        Returns:
            True if something was deleted, False if not found
        """
        path = self._get_path(name)
        cached = self._cache.pop(name, None) is not None

        if path.exists():
            path.unlink()
            return True

        return cached

    async def add_part(self, name: str, notation: str) -> tuple[Song, int]:
        """
        Append a part to a song.

        Returns:
            The updated Song and the new part's index
        """
        song = await self.get(name)
        if song is None:
            raise ValueError(ErrorMessages.SONG_NOT_FOUND.format(name=name))

        index = song.add_part(notation)
        song.modified = datetime.now(UTC)
        return song, index

    def _get_path(self, name: str) -> Path:
        """Get the file path for a song."""
        safe_name = name.replace(" ", "_").replace("/", "_")
        return self.songs_dir / f"{safe_name}.song.yaml"
