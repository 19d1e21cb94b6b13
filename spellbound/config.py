"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass

from puzzle_framework.env_utils import getenv_bool, getenv_int
from puzzle_framework.errors import ConfigurationError

from .spellbound_state import DEFAULT_ALPHABET, DEFAULT_POOL_SIZE, Difficulty

USER_FACING_ERROR_MESSAGE = "Oops! Something went wrong."


@dataclass(frozen=True)
class SessionConfig:
    """Runtime settings for a puzzle session."""

    pool_size: int = DEFAULT_POOL_SIZE
    alphabet: str = DEFAULT_ALPHABET
    allow_duplicate_distractors: bool = True
    default_difficulty: Difficulty = Difficulty.EASY
    error_message: str = USER_FACING_ERROR_MESSAGE

    def __post_init__(self) -> None:
        if self.pool_size < 1:
            raise ConfigurationError(f"pool_size must be >= 1, got {self.pool_size}.")
        if not any(letter.strip() for letter in self.alphabet):
            raise ConfigurationError("alphabet must contain at least one letter.")

    @classmethod
    def from_env(cls, **overrides: object) -> "SessionConfig":
        """Build a config from SPELLBOUND_* environment variables."""
        values: dict[str, object] = {
            "pool_size": getenv_int("SPELLBOUND_POOL_SIZE", DEFAULT_POOL_SIZE),
            "allow_duplicate_distractors": getenv_bool("SPELLBOUND_ALLOW_DUPLICATE_DISTRACTORS", True),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)  # type: ignore[arg-type]
