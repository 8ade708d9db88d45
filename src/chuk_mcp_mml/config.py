"""
Configuration - compile policy, MIDI export settings and storage paths.

Configuration is read from a YAML file (mml.yaml by default):

    error_policy: continue
    ticks_per_beat: 480
    midi_reference_bpm: 120
    songs_dir: songs
    output_dir: output

Relative paths are resolved against the directory holding the file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from chuk_mcp_mml.constants import ErrorPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "mml.yaml"


class MMLConfig(BaseModel):
    """Settings shared by the compiler tools, MIDI export and song storage."""

    error_policy: ErrorPolicy = Field(
        ErrorPolicy.ABORT, description="What a batch compile does when one string fails"
    )
    ticks_per_beat: int = Field(480, gt=0, description="MIDI resolution")
    midi_reference_bpm: int = Field(120, gt=0, description="Tempo of the MIDI tick grid")
    songs_dir: Path = Field(Path("songs"), description="Directory for song YAML files")
    output_dir: Path = Field(Path("output"), description="Directory for MIDI output")

    def resolve_paths(self, base: Path) -> MMLConfig:
        """Return a copy with relative directories anchored at base."""
        return self.model_copy(
            update={
                "songs_dir": self.songs_dir if self.songs_dir.is_absolute() else base / self.songs_dir,
                "output_dir": (
                    self.output_dir if self.output_dir.is_absolute() else base / self.output_dir
                ),
            }
        )


def load_config(path: Path | None = None) -> MMLConfig:
    """
    Load configuration from a YAML file.

    Args:
        path: Config file (default: ./mml.yaml). A missing file gives defaults.

    Returns:
        MMLConfig with paths resolved against the file's directory
    """
    path = path or Path.cwd() / DEFAULT_CONFIG_NAME

    if not path.exists():
        logger.debug(f"No config at {path}, using defaults")
        return MMLConfig().resolve_paths(path.parent)

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    logger.info(f"Loaded config from {path}")
    return MMLConfig.model_validate(data).resolve_paths(path.parent)
