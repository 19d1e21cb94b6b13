"""Round event schema and JSONL export utilities."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from time import time
from typing import Any, Iterable, Mapping

from .serialize import json_dumps, to_serializable


class EventType(str, Enum):
    """Event types emitted by a puzzle session."""

    ROUND_START = "round_start"
    ROUND_READY = "round_ready"
    ROUND_FAILED = "round_failed"
    SELECT = "select"
    PLACE = "place"
    REMOVE = "remove"
    VERIFY = "verify"
    SOLVED = "solved"
    ILLUSTRATION = "illustration"
    ILLEGAL_ACTION = "illegal_action"
    LEAVE = "leave"


@dataclass(frozen=True)
class RoundEvent:
    """Single history entry recorded while a session handles a command."""

    event_type: EventType
    session_id: str
    round_id: int
    timestamp_ms: int
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable event data."""
        return {
            "event_type": self.event_type.value,
            "session_id": self.session_id,
            "round_id": self.round_id,
            "timestamp_ms": self.timestamp_ms,
            "payload": to_serializable(self.payload),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoundEvent":
        """Build an event from a dictionary payload."""
        return cls(
            event_type=EventType(str(data["event_type"])),
            session_id=str(data["session_id"]),
            round_id=int(data["round_id"]),
            timestamp_ms=int(data["timestamp_ms"]),
            payload=dict(data.get("payload", {})),
        )

    @classmethod
    def create(cls, event_type: EventType, session_id: str, round_id: int, payload: dict[str, Any]) -> "RoundEvent":
        """Construct an event stamped with the current wall-clock time."""
        return cls(
            event_type=event_type,
            session_id=session_id,
            round_id=round_id,
            timestamp_ms=int(time() * 1000),
            payload=payload,
        )


def write_jsonl(path: str | Path, events: Iterable[RoundEvent]) -> None:
    """Persist events as JSONL to disk."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        for event in events:
            handle.write(json_dumps(event.to_dict()))
            handle.write("\n")


def read_jsonl(path: str | Path) -> list[RoundEvent]:
    """Load events previously written by `write_jsonl`."""
    events: list[RoundEvent] = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            if line.strip():
                events.append(RoundEvent.from_dict(json.loads(line)))
    return events
