"""SpellBound package exports."""

from .assignment import AssignmentStore
from .choice_pool import ChoicePoolBuilder
from .config import SessionConfig
from .selection import SelectionController
from .spellbound_actions import (
    ActionType,
    ClickSlot,
    DropTile,
    RemoveTile,
    SelectTile,
    Verify,
    action_from_dict,
)
from .spellbound_observation import RoundObservation, SlotView, TileView
from .spellbound_session import PuzzleSession
from .spellbound_state import (
    DEFAULT_ALPHABET,
    DEFAULT_POOL_SIZE,
    ChoicePool,
    Difficulty,
    Feedback,
    IllustrationState,
    Puzzle,
    SessionStatus,
    Tile,
    parse_difficulty,
)
from .verifier import VerificationResult, check

__all__ = [
    "ActionType",
    "AssignmentStore",
    "ChoicePool",
    "ChoicePoolBuilder",
    "ClickSlot",
    "DEFAULT_ALPHABET",
    "DEFAULT_POOL_SIZE",
    "Difficulty",
    "DropTile",
    "Feedback",
    "IllustrationState",
    "Puzzle",
    "PuzzleSession",
    "RemoveTile",
    "RoundObservation",
    "SelectTile",
    "SelectionController",
    "SessionConfig",
    "SessionStatus",
    "SlotView",
    "Tile",
    "TileView",
    "VerificationResult",
    "Verify",
    "action_from_dict",
    "check",
    "parse_difficulty",
]
