"""Puzzle sources: static fallback list, Gemini-generated puzzles, and a chain of both."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
import logging
import random
from typing import Any, Mapping, Sequence

from puzzle_framework.errors import PuzzleSourceError
from puzzle_framework.http_utils import HttpRequestError

from ..spellbound_state import Difficulty, Puzzle
from .fallback_puzzles import FALLBACK_PUZZLES
from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = (
    "Animals",
    "Food & Drink",
    "Household Objects",
    "Nature",
    "Vehicles",
    "Clothing",
    "Toys",
    "Body Parts",
    "Colors",
    "Shapes",
    "Space",
    "Ocean",
)

PUZZLE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "word": {
            "type": "STRING",
            "description": "The word to spell. Must be a simple noun suitable for children.",
        },
        "missingIndices": {
            "type": "ARRAY",
            "items": {"type": "INTEGER"},
            "description": "Indices of the letters to hide (0-based).",
        },
        "hint": {
            "type": "STRING",
            "description": "A simple, child-friendly description of the word.",
        },
    },
    "required": ["word", "missingIndices", "hint"],
}


def build_prompt(difficulty: Difficulty, category: str) -> str:
    """Return the generation prompt for a difficulty and word category."""
    if difficulty is Difficulty.EASY:
        return (
            f"Generate a spelling puzzle for a child (age 4-5) using a word from the category '{category}'. "
            "The word must be 3-4 letters long. Hide exactly 1 letter. Return JSON."
        )
    return (
        f"Generate a spelling puzzle for a child (age 6-7) using a word from the category '{category}'. "
        "The word must be 4-6 letters long. Hide exactly 2 letters. Return JSON."
    )


class PuzzleSource(ABC):
    """Produces a puzzle for a requested difficulty."""

    source_name: str = "puzzle_source"

    @abstractmethod
    async def fetch_puzzle(self, difficulty: Difficulty) -> Puzzle:
        """Return a valid puzzle or raise `PuzzleSourceError`."""


class FallbackPuzzleSource(PuzzleSource):
    """Serves puzzles from a static list."""

    source_name = "fallback"

    def __init__(
        self,
        puzzles: Mapping[Difficulty, Sequence[Mapping[str, Any]]] | None = None,
        *,
        seed: int | None = None,
    ):
        self.puzzles = puzzles if puzzles is not None else FALLBACK_PUZZLES
        self._rng = random.Random(seed)

    async def fetch_puzzle(self, difficulty: Difficulty) -> Puzzle:
        candidates = self.puzzles.get(difficulty) or ()
        if not candidates:
            raise PuzzleSourceError(f"No fallback puzzles configured for {difficulty.value}.")
        return Puzzle.from_dict(self._rng.choice(list(candidates)))


class GeminiPuzzleSource(PuzzleSource):
    """Asks Gemini for a child-friendly word from a random category."""

    source_name = "gemini"

    def __init__(self, client: GeminiClient, *, temperature: float = 1.2, seed: int | None = None):
        self.client = client
        self.temperature = temperature
        self._rng = random.Random(seed)

    async def fetch_puzzle(self, difficulty: Difficulty) -> Puzzle:
        category = self._rng.choice(CATEGORIES)
        prompt = build_prompt(difficulty, category)
        try:
            data = await asyncio.to_thread(
                self.client.generate_json,
                prompt,
                schema=PUZZLE_SCHEMA,
                temperature=self.temperature,
            )
        except (HttpRequestError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise PuzzleSourceError(f"Failed to generate puzzle: {exc}") from exc
        return Puzzle.from_dict(data)


class ChainedPuzzleSource(PuzzleSource):
    """Tries a primary source and falls back to a secondary one on error."""

    source_name = "chained"

    def __init__(self, primary: PuzzleSource, fallback: PuzzleSource):
        self.primary = primary
        self.fallback = fallback

    async def fetch_puzzle(self, difficulty: Difficulty) -> Puzzle:
        try:
            return await self.primary.fetch_puzzle(difficulty)
        except PuzzleSourceError as exc:
            logger.warning("%s puzzle source failed, using %s: %s", self.primary.source_name, self.fallback.source_name, exc)
            return await self.fallback.fetch_puzzle(difficulty)


def build_puzzle_source(client: GeminiClient | None = None, *, seed: int | None = None) -> PuzzleSource:
    """Return the Gemini source chained to the fallback list, or the fallback alone without a key."""
    resolved = client if client is not None else GeminiClient.from_env()
    fallback = FallbackPuzzleSource(seed=seed)
    if resolved is None:
        logger.info("No Gemini API key configured; serving fallback puzzles.")
        return fallback
    return ChainedPuzzleSource(GeminiPuzzleSource(resolved, seed=seed), fallback)
