"""Choice-pool construction: correct letters plus shuffled distractors."""

from __future__ import annotations

from itertools import count
import random

from puzzle_framework.errors import ConfigurationError

from .spellbound_state import DEFAULT_ALPHABET, DEFAULT_POOL_SIZE, ChoicePool, Puzzle, Tile


class ChoicePoolBuilder:
    """Builds the fixed-size tile pool offered for a round.

    Tile ids come from a counter owned by the builder, so ids never repeat
    across the rounds of one session and never depend on letter or position.
    """

    def __init__(self, *, allow_duplicate_distractors: bool = True, id_prefix: str = "tile"):
        self.allow_duplicate_distractors = allow_duplicate_distractors
        self.id_prefix = id_prefix
        self._ids = count(1)

    def build(
        self,
        puzzle: Puzzle,
        target_size: int = DEFAULT_POOL_SIZE,
        alphabet: str = DEFAULT_ALPHABET,
        *,
        rng: random.Random | None = None,
    ) -> ChoicePool:
        """Return `target_size` tiles: one per hidden letter, the rest distractors, shuffled."""
        rng = rng or random.Random()
        correct = puzzle.correct_letters()
        if target_size < len(correct):
            raise ConfigurationError(
                f"Pool size {target_size} is smaller than the {len(correct)} hidden letters of the puzzle."
            )

        distractor_count = target_size - len(correct)
        distractors: list[str] = []
        if distractor_count:
            candidates = self._distractor_candidates(alphabet, correct)
            distractors = [rng.choice(candidates) for _ in range(distractor_count)]

        tiles = [self._new_tile(letter) for letter in [*correct, *distractors]]
        # random.shuffle is an in-place Fisher-Yates permutation.
        rng.shuffle(tiles)
        return ChoicePool(tiles=tuple(tiles))

    def _distractor_candidates(self, alphabet: str, correct: list[str]) -> list[str]:
        letters = [letter.upper() for letter in dict.fromkeys(alphabet) if letter.strip()]
        if not letters:
            raise ConfigurationError("Alphabet must contain at least one letter.")
        if self.allow_duplicate_distractors:
            return letters
        excluded = {letter.upper() for letter in correct}
        remaining = [letter for letter in letters if letter not in excluded]
        if not remaining:
            raise ConfigurationError("No distractor letters left once the puzzle's letters are excluded.")
        return remaining

    def _new_tile(self, letter: str) -> Tile:
        return Tile(id=f"{self.id_prefix}-{next(self._ids)}", letter=letter)
