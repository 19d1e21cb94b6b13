"""Puzzle and illustration sources."""

from .gemini_client import GeminiClient
from .illustration_sources import (
    GeminiIllustrationSource,
    IllustrationSource,
    PlaceholderIllustrationSource,
    build_illustration_source,
)
from .puzzle_sources import (
    ChainedPuzzleSource,
    FallbackPuzzleSource,
    GeminiPuzzleSource,
    PuzzleSource,
    build_puzzle_source,
)

__all__ = [
    "ChainedPuzzleSource",
    "FallbackPuzzleSource",
    "GeminiClient",
    "GeminiIllustrationSource",
    "GeminiPuzzleSource",
    "IllustrationSource",
    "PlaceholderIllustrationSource",
    "PuzzleSource",
    "build_illustration_source",
    "build_puzzle_source",
]
