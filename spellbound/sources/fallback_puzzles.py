"""Static puzzles served when no generation backend is configured."""

from __future__ import annotations

from ..spellbound_state import Difficulty

FALLBACK_PUZZLES: dict[Difficulty, tuple[dict[str, object], ...]] = {
    Difficulty.EASY: (
        {"word": "CAT", "missingIndices": [1], "hint": "A furry pet that says meow."},
        {"word": "DOG", "missingIndices": [0], "hint": "A loyal pet that barks."},
        {"word": "SUN", "missingIndices": [2], "hint": "It shines bright in the sky."},
        {"word": "FISH", "missingIndices": [3], "hint": "It swims in the water."},
        {"word": "CAKE", "missingIndices": [1], "hint": "A sweet treat for birthdays."},
        {"word": "BUS", "missingIndices": [1], "hint": "A big vehicle that carries many people."},
        {"word": "HAT", "missingIndices": [0], "hint": "You wear it on your head."},
        {"word": "MOON", "missingIndices": [2], "hint": "It glows in the night sky."},
    ),
    Difficulty.HARD: (
        {"word": "APPLE", "missingIndices": [1, 4], "hint": "A crunchy red or green fruit."},
        {"word": "ROCKET", "missingIndices": [0, 3], "hint": "It flies up into space."},
        {"word": "TURTLE", "missingIndices": [2, 5], "hint": "A slow animal with a shell."},
        {"word": "BANANA", "missingIndices": [1, 4], "hint": "A long yellow fruit."},
        {"word": "CLOUD", "missingIndices": [1, 3], "hint": "Fluffy and white, floating in the sky."},
        {"word": "SHOES", "missingIndices": [0, 2], "hint": "You wear them on your feet."},
        {"word": "PLANET", "missingIndices": [2, 4], "hint": "Earth is one of these."},
        {"word": "TRAIN", "missingIndices": [1, 3], "hint": "It rides along the tracks."},
    ),
}
