"""Render-ready snapshots of a puzzle session."""

from __future__ import annotations

from dataclasses import dataclass, field

from puzzle_framework.model import Model

from .spellbound_state import Difficulty, Feedback, IllustrationState, SessionStatus


@dataclass(frozen=True)
class SlotView:
    """One position of the word display."""

    position: int
    missing: bool
    letter: str | None
    tile_id: str | None = None


@dataclass(frozen=True)
class TileView:
    """One tile of the pool; used tiles stay in place as placeholders."""

    id: str
    letter: str
    used: bool
    selected: bool


@dataclass(frozen=True)
class RoundObservation(Model):
    """Everything the presentation layer needs to draw the current screen.

    The hidden letters are never included while the round is unsolved.
    """

    session_id: str
    round_id: int
    status: SessionStatus
    difficulty: Difficulty
    hint: str | None
    slots: tuple[SlotView, ...]
    pool: tuple[TileView, ...]
    selected_tile_id: str | None
    feedback: Feedback
    slot_results: dict[int, bool]
    can_verify: bool
    locked: bool
    illustration_url: str | None
    illustration_state: IllustrationState | None
    error_message: str | None = None
    word: str | None = None
    assignment: dict[int, str] = field(default_factory=dict)

    def filled_word(self) -> str:
        """Return the word as currently shown, with `_` for empty slots."""
        return "".join(slot.letter or "_" for slot in self.slots)
