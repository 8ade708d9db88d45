"""
Song model - a named batch of MML parts.

A Song holds one notation string per part. It is what gets saved to
YAML, compiled to MIDI, or handed to the sequencer's prepare().
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Song(BaseModel):
    """
    A named collection of MML notation strings, one per part.
    """

    # Metadata
    schema_version: str = Field("song/v1", description="Schema version")
    name: str = Field(..., description="Song name")
    description: str = Field("", description="Free-form description")
    created: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Creation timestamp"
    )
    modified: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Last modified"
    )

    # One notation string per part
    parts: list[str] = Field(default_factory=list, description="MML notation per part")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure song name is a valid identifier."""
        if not v or not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError(f"Invalid song name: {v}")
        return v

    def add_part(self, notation: str) -> int:
        """Append a part and return its index."""
        self.parts.append(notation)
        return len(self.parts) - 1

    def to_yaml_dict(self) -> dict[str, Any]:
        """
        Convert to a YAML-friendly dict.

        This produces the canonical YAML format for songs.
        """
        return {
            "schema": self.schema_version,
            "name": self.name,
            "description": self.description,
            "created": self.created.isoformat(),
            "modified": self.modified.isoformat(),
            "parts": list(self.parts),
        }

    @classmethod
    def from_yaml_dict(cls, data: dict[str, Any]) -> Song:
        """
        Create a Song from a YAML-parsed dict.

        This parses the canonical YAML format.
        """
        song = cls(
            schema_version=data.get("schema", "song/v1"),
            name=data["name"],
            description=data.get("description", ""),
            parts=[str(part) for part in data.get("parts", [])],
        )
        if "created" in data:
            song.created = _parse_datetime(data["created"])
        if "modified" in data:
            song.modified = _parse_datetime(data["modified"])
        return song


def _parse_datetime(value: Any) -> datetime:
    """YAML may hand back a datetime already, or an ISO string."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
