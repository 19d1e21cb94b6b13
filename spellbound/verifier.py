"""Answer verification for a filled-in puzzle."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from puzzle_framework.model import Model

from .spellbound_state import ChoicePool, Feedback, Puzzle


@dataclass(frozen=True)
class VerificationResult(Model):
    """Outcome of checking an assignment against the puzzle's word."""

    complete: bool
    correct: bool
    slot_results: dict[int, bool] = field(default_factory=dict)

    @property
    def feedback(self) -> Feedback:
        if not self.complete:
            return Feedback.INCOMPLETE
        return Feedback.CORRECT if self.correct else Feedback.INCORRECT


def check(puzzle: Puzzle, pool: ChoicePool, assignment: Mapping[int, str]) -> VerificationResult:
    """Compare each bound tile letter with the hidden letter at its slot.

    Incomplete assignments are never correct. `slot_results` covers every
    bound slot, so the caller can highlight individual mistakes.
    """
    slot_results: dict[int, bool] = {}
    for position in puzzle.missing_positions:
        tile_id = assignment.get(position)
        if tile_id is None:
            continue
        tile = pool.get(tile_id)
        slot_results[position] = tile is not None and tile.letter.upper() == puzzle.word[position].upper()

    complete = len(slot_results) == len(puzzle.missing_positions)
    correct = complete and all(slot_results.values())
    return VerificationResult(complete=complete, correct=correct, slot_results=slot_results)
