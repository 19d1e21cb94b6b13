"""Data model and enums for SpellBound rounds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Self

from puzzle_framework.errors import InvalidPuzzleError
from puzzle_framework.model import Model

DEFAULT_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_POOL_SIZE = 6


class Difficulty(str, Enum):
    """Puzzle difficulty chosen on the start screen."""

    EASY = "EASY"
    HARD = "HARD"


class SessionStatus(str, Enum):
    """Lifecycle status of a puzzle session."""

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    SOLVED = "solved"
    FAILED = "failed"


class Feedback(str, Enum):
    """Transient verification feedback shown under the word."""

    NONE = "none"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INCOMPLETE = "incomplete"


class IllustrationState(str, Enum):
    """Whether the decorative image for a round has arrived."""

    PENDING = "pending"
    READY = "ready"
    UNAVAILABLE = "unavailable"


def parse_difficulty(value: Difficulty | str | None, default: Difficulty = Difficulty.EASY) -> Difficulty:
    """Parse a difficulty label case-insensitively."""
    if value is None:
        return default
    if isinstance(value, Difficulty):
        return value
    normalized = str(value).strip().upper()
    try:
        return Difficulty(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown difficulty {value!r}. Expected one of {[d.value for d in Difficulty]}.") from exc


@dataclass(frozen=True)
class Puzzle(Model):
    """A word with some letter positions hidden, plus a hint for the player."""

    word: str
    missing_positions: tuple[int, ...]
    hint: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.word, str):
            raise InvalidPuzzleError(f"Puzzle word must be a string, got {type(self.word).__name__}.")
        word = self.word.strip().upper()
        if not word:
            raise InvalidPuzzleError("Puzzle word must be non-empty.")
        if not word.isalpha():
            raise InvalidPuzzleError(f"Puzzle word must contain only letters, got {self.word!r}.")

        positions = list(self.missing_positions)
        if any(isinstance(position, bool) or not isinstance(position, int) for position in positions):
            raise InvalidPuzzleError(f"Missing positions must be integers, got {self.missing_positions!r}.")
        if not positions:
            raise InvalidPuzzleError("Puzzle must hide at least one letter.")
        if len(set(positions)) != len(positions):
            raise InvalidPuzzleError(f"Duplicate missing positions: {positions}.")
        out_of_range = [position for position in positions if position < 0 or position >= len(word)]
        if out_of_range:
            raise InvalidPuzzleError(f"Missing positions {out_of_range} fall outside word of length {len(word)}.")

        object.__setattr__(self, "word", word)
        object.__setattr__(self, "missing_positions", tuple(sorted(positions)))
        object.__setattr__(self, "hint", str(self.hint or "").strip())

    def correct_letters(self) -> list[str]:
        """Return the hidden letters in ascending position order."""
        return [self.word[position] for position in self.missing_positions]

    def is_missing(self, position: int) -> bool:
        return position in self.missing_positions

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a puzzle from a source payload (accepts `missingIndices`)."""
        if not isinstance(data, Mapping):
            raise InvalidPuzzleError(f"Puzzle payload must be an object, got {type(data).__name__}.")
        positions = data.get("missing_positions", data.get("missingIndices"))
        if "word" not in data or positions is None:
            raise InvalidPuzzleError(f"Puzzle payload is missing required fields: {sorted(data)}.")
        if isinstance(positions, (str, bytes)) or not isinstance(positions, Iterable):
            raise InvalidPuzzleError(f"Missing positions must be a list, got {positions!r}.")
        return cls(word=data["word"], missing_positions=tuple(positions), hint=data.get("hint", ""))


@dataclass(frozen=True)
class Tile(Model):
    """A uniquely identified letter the player can place into a slot."""

    id: str
    letter: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Tile.id must be non-empty.")
        if len(self.letter) != 1:
            raise ValueError(f"Tile.letter must be a single character, got {self.letter!r}.")


@dataclass(frozen=True)
class ChoicePool(Model):
    """Ordered, immutable set of tiles offered for one round."""

    tiles: tuple[Tile, ...]

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __contains__(self, tile_id: object) -> bool:
        return any(tile.id == tile_id for tile in self.tiles)

    def get(self, tile_id: str) -> Tile | None:
        """Return the tile with the given id, if it belongs to this pool."""
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def tile_ids(self) -> list[str]:
        return [tile.id for tile in self.tiles]

    def letters(self) -> list[str]:
        return [tile.letter for tile in self.tiles]
