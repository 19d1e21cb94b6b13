"""Tests for puzzle and illustration sources."""

from __future__ import annotations

import asyncio
import json

import pytest

from puzzle_framework import env_utils
from puzzle_framework.errors import InvalidPuzzleError, PuzzleSourceError
from puzzle_framework.http_utils import HttpRequestError
from spellbound.sources.fallback_puzzles import FALLBACK_PUZZLES
from spellbound.sources.gemini_client import GeminiClient
from spellbound.sources.illustration_sources import (
    GeminiIllustrationSource,
    PlaceholderIllustrationSource,
    build_illustration_source,
)
from spellbound.sources.puzzle_sources import (
    ChainedPuzzleSource,
    FallbackPuzzleSource,
    GeminiPuzzleSource,
    build_puzzle_source,
)
from spellbound.spellbound_state import Difficulty, Puzzle


def _gemini_text_response(data: object) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": json.dumps(data)}]}}]}


def _clear_gemini_env(monkeypatch) -> None:
    monkeypatch.setattr(env_utils, "_DOTENV_LOADED", True)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_every_fallback_puzzle_satisfies_the_contract(difficulty: Difficulty) -> None:
    for payload in FALLBACK_PUZZLES[difficulty]:
        puzzle = Puzzle.from_dict(payload)
        expected_hidden = 1 if difficulty is Difficulty.EASY else 2
        assert len(puzzle.missing_positions) == expected_hidden


def test_fallback_source_serves_puzzles_for_requested_difficulty() -> None:
    source = FallbackPuzzleSource(seed=3)
    puzzle = asyncio.run(source.fetch_puzzle(Difficulty.HARD))

    hard_words = {payload["word"] for payload in FALLBACK_PUZZLES[Difficulty.HARD]}
    assert puzzle.word in hard_words


def test_fallback_source_without_puzzles_raises() -> None:
    source = FallbackPuzzleSource({Difficulty.EASY: ()})
    with pytest.raises(PuzzleSourceError):
        asyncio.run(source.fetch_puzzle(Difficulty.EASY))


def test_gemini_source_parses_and_normalizes_word(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        captured["url"] = url
        captured["payload"] = payload
        captured["headers"] = headers
        return _gemini_text_response({"word": "frog", "missingIndices": [2], "hint": "It hops."})

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiPuzzleSource(GeminiClient(api_key="k"), seed=1)

    puzzle = asyncio.run(source.fetch_puzzle(Difficulty.EASY))

    assert puzzle == Puzzle(word="FROG", missing_positions=(2,), hint="It hops.")
    assert captured["url"] == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
    assert captured["headers"] == {"x-goog-api-key": "k"}
    generation = captured["payload"]["generationConfig"]
    assert generation["responseMimeType"] == "application/json"
    assert generation["temperature"] == 1.2
    prompt = captured["payload"]["contents"][0]["parts"][0]["text"]
    assert "Hide exactly 1 letter" in prompt


def test_gemini_source_rejects_out_of_range_positions(monkeypatch) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        return _gemini_text_response({"word": "FROG", "missingIndices": [9], "hint": "It hops."})

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiPuzzleSource(GeminiClient(api_key="k"))

    with pytest.raises(InvalidPuzzleError):
        asyncio.run(source.fetch_puzzle(Difficulty.EASY))


def test_gemini_source_wraps_transport_errors(monkeypatch) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        raise HttpRequestError(url, "HTTP 503 from gemini", status=503)

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiPuzzleSource(GeminiClient(api_key="k"))

    with pytest.raises(PuzzleSourceError):
        asyncio.run(source.fetch_puzzle(Difficulty.HARD))


def test_chained_source_falls_back_on_primary_failure(monkeypatch) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        return {"candidates": []}

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    fallback = FallbackPuzzleSource({Difficulty.EASY: ({"word": "SUN", "missingIndices": [2], "hint": "Bright."},)})
    source = ChainedPuzzleSource(GeminiPuzzleSource(GeminiClient(api_key="k")), fallback)

    puzzle = asyncio.run(source.fetch_puzzle(Difficulty.EASY))

    assert puzzle.word == "SUN"


@pytest.mark.parametrize(
    "response",
    [
        {"candidates": ["oops"]},
        {"candidates": [{"content": "not an object"}]},
        {"candidates": [{"content": {"parts": [None, 7]}}]},
        [{"candidates": []}],
    ],
)
def test_malformed_gemini_response_falls_back_through_the_chain(monkeypatch, response) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        return response

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    primary = GeminiPuzzleSource(GeminiClient(api_key="k"))
    fallback = FallbackPuzzleSource({Difficulty.EASY: ({"word": "SUN", "missingIndices": [2], "hint": "Bright."},)})

    with pytest.raises(PuzzleSourceError):
        asyncio.run(primary.fetch_puzzle(Difficulty.EASY))
    puzzle = asyncio.run(ChainedPuzzleSource(primary, fallback).fetch_puzzle(Difficulty.EASY))

    assert puzzle.word == "SUN"


@pytest.mark.parametrize("positions", [[1.7], [True], ["1"]])
def test_non_integer_positions_are_rejected(positions) -> None:
    with pytest.raises(InvalidPuzzleError, match="must be integers"):
        Puzzle.from_dict({"word": "CAT", "missingIndices": positions, "hint": "A pet."})


def test_factories_use_offline_sources_without_api_key(monkeypatch) -> None:
    _clear_gemini_env(monkeypatch)

    assert isinstance(build_puzzle_source(seed=1), FallbackPuzzleSource)
    assert isinstance(build_illustration_source(), PlaceholderIllustrationSource)


def test_factories_chain_gemini_when_key_present(monkeypatch) -> None:
    _clear_gemini_env(monkeypatch)
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    source = build_puzzle_source(seed=1)

    assert isinstance(source, ChainedPuzzleSource)
    assert isinstance(source.primary, GeminiPuzzleSource)
    assert source.primary.client.api_key == "secret"
    assert isinstance(build_illustration_source(), GeminiIllustrationSource)


def test_placeholder_url_is_seeded_by_word() -> None:
    url = asyncio.run(PlaceholderIllustrationSource().fetch_illustration("cat"))

    assert url == "https://picsum.photos/seed/CAT/500/500"


def test_imagen_bytes_become_a_data_url(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        captured["url"] = url
        return {"predictions": [{"bytesBase64Encoded": "QUJD", "mimeType": "image/jpeg"}]}

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiIllustrationSource(GeminiClient(api_key="k"))

    url = asyncio.run(source.fetch_illustration("CAT"))

    assert url == "data:image/jpeg;base64,QUJD"
    assert str(captured["url"]).endswith("/models/imagen-4.0-generate-001:predict")


def test_imagen_failure_degrades_to_placeholder(monkeypatch) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        raise HttpRequestError(url, "HTTP 403 from imagen", status=403)

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiIllustrationSource(GeminiClient(api_key="k"))

    url = asyncio.run(source.fetch_illustration("CAT"))

    assert url == "https://picsum.photos/seed/CAT/500/500"


@pytest.mark.parametrize(
    "response",
    [
        {"predictions": []},
        {"predictions": [{"mimeType": "image/jpeg"}]},
        {"predictions": ["QUJD"]},
        ["QUJD"],
    ],
)
def test_malformed_imagen_response_degrades_to_placeholder(monkeypatch, response) -> None:
    def fake_post_json(url, payload, headers, timeout_sec=60.0):  # noqa: ANN001
        return response

    monkeypatch.setattr("spellbound.sources.gemini_client.post_json", fake_post_json)
    source = GeminiIllustrationSource(GeminiClient(api_key="k"))

    url = asyncio.run(source.fetch_illustration("dog"))

    assert url == "https://picsum.photos/seed/DOG/500/500"
