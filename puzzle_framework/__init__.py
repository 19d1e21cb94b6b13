"""Framework exports for actions, snapshots, events and structured errors."""

from .action import Action
from .errors import (
    ConfigurationError,
    IllegalActionError,
    IllustrationSourceError,
    InvalidPuzzleError,
    PuzzleSourceError,
    SpellboundError,
)
from .events import EventType, RoundEvent, read_jsonl, write_jsonl
from .model import Model

__all__ = [
    "Action",
    "ConfigurationError",
    "EventType",
    "IllegalActionError",
    "IllustrationSourceError",
    "InvalidPuzzleError",
    "Model",
    "PuzzleSourceError",
    "RoundEvent",
    "SpellboundError",
    "read_jsonl",
    "write_jsonl",
]
