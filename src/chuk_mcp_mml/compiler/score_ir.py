"""
Score IR - an inspectable, serializable view of compiled MML parts.

The IR sits beside the sequencer's part store: it is the same Events,
grouped per part, with the source notation kept for traceability.
The IR is versioned and designed to be:
- Deterministic: same notation → same IR
- Serializable: JSON for inspection and golden-file testing
- Diffable: parts in index order, events in timeline order

Schema version: mml_score/v1
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_mml.core import spell
from chuk_mcp_mml.models.event import Event

# Current schema version
SCHEMA_VERSION = "mml_score/v1"


@dataclass(frozen=True)
class IRPart:
    """One compiled part: its index, source notation and Events."""

    index: int
    source: str
    events: tuple[Event, ...]

    @property
    def duration(self) -> float:
        """Length of the part in seconds."""
        return self.events[-1].stop if self.events else 0.0

    def tone_count(self) -> int:
        """Number of sounding tones across all events."""
        return sum(1 for event in self.events for _ in event.tones())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "source": self.source,
            "duration": self.duration,
            "events": [
                {**event.to_dict(), "names": [spell(i) for i in event.indices]}
                for event in self.events
            ],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IRPart:
        """Create from dictionary."""
        return cls(
            index=d["index"],
            source=d.get("source", ""),
            events=tuple(Event.from_dict(e) for e in d.get("events", [])),
        )


@dataclass
class ScoreIR:
    """
    The complete IR for a batch of notation strings.

    Failed strings have no IRPart; their indices are listed in `failed`.
    """

    schema: str = SCHEMA_VERSION
    name: str = ""
    parts: list[IRPart] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)

    @classmethod
    def from_compiled(
        cls,
        notations: Sequence[str],
        compiled: Mapping[int, Sequence[Event]],
        name: str = "",
    ) -> ScoreIR:
        """
        Build the IR from compile_batch() output.

        Args:
            notations: The notation strings that were compiled
            compiled: Part index → Events
            name: Optional score name
        """
        return cls(
            name=name,
            parts=[
                IRPart(index=index, source=notations[index], events=tuple(compiled[index]))
                for index in sorted(compiled)
            ],
            failed=[index for index in range(len(notations)) if index not in compiled],
        )

    @property
    def duration(self) -> float:
        """Length of the longest part in seconds."""
        return max((part.duration for part in self.parts), default=0.0)

    def event_count(self) -> int:
        """Total number of events over all parts."""
        return sum(len(part.events) for part in self.parts)

    def events_by_part(self) -> dict[int, list[Event]]:
        """Part index → Events, the shape parts_to_midi() takes."""
        return {part.index: list(part.events) for part in self.parts}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "schema": self.schema,
            "name": self.name,
            "duration": self.duration,
            "parts": [p.to_dict() for p in sorted(self.parts, key=lambda p: p.index)],
            "failed": sorted(self.failed),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScoreIR:
        """Create from dictionary."""
        return cls(
            schema=d.get("schema", SCHEMA_VERSION),
            name=d.get("name", ""),
            parts=[IRPart.from_dict(p) for p in d.get("parts", [])],
            failed=list(d.get("failed", [])),
        )

    @classmethod
    def from_json(cls, json_str: str) -> ScoreIR:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def summary(self) -> dict[str, Any]:
        """Generate a summary for quick inspection."""
        indices = [
            int(i) for part in self.parts for event in part.events for _, i, _ in event.tones()
        ]
        return {
            "name": self.name,
            "parts": len(self.parts),
            "failed": sorted(self.failed),
            "total_events": self.event_count(),
            "duration": round(self.duration, 6),
            "index_range": (min(indices), max(indices)) if indices else (0, 0),
        }
