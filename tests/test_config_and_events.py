"""Tests for session configuration, env parsing, action payloads and event logs."""

from __future__ import annotations

import os

import pytest

from puzzle_framework import env_utils
from puzzle_framework.errors import ConfigurationError, IllegalActionError
from puzzle_framework.events import EventType, RoundEvent, read_jsonl, write_jsonl
from puzzle_framework.serialize import derive_seed, json_dumps
from spellbound.config import SessionConfig
from spellbound.spellbound_actions import DropTile, Verify, action_from_dict
from spellbound.spellbound_state import Difficulty


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.setattr(env_utils, "_DOTENV_LOADED", True)
    monkeypatch.delenv("SPELLBOUND_POOL_SIZE", raising=False)
    monkeypatch.delenv("SPELLBOUND_ALLOW_DUPLICATE_DISTRACTORS", raising=False)


def test_session_config_defaults_and_env(monkeypatch) -> None:
    assert SessionConfig.from_env() == SessionConfig()

    monkeypatch.setenv("SPELLBOUND_POOL_SIZE", " 9 ")
    monkeypatch.setenv("SPELLBOUND_ALLOW_DUPLICATE_DISTRACTORS", "off")
    config = SessionConfig.from_env()
    assert config.pool_size == 9
    assert config.allow_duplicate_distractors is False

    overridden = SessionConfig.from_env(pool_size=4, default_difficulty=Difficulty.HARD, alphabet=None)
    assert overridden.pool_size == 4
    assert overridden.default_difficulty is Difficulty.HARD
    assert overridden.alphabet == SessionConfig().alphabet


def test_bad_env_values_raise_configuration_error(monkeypatch) -> None:
    monkeypatch.setenv("SPELLBOUND_POOL_SIZE", "six")
    with pytest.raises(ConfigurationError, match="SPELLBOUND_POOL_SIZE"):
        SessionConfig.from_env()

    monkeypatch.setenv("SPELLBOUND_POOL_SIZE", "6")
    monkeypatch.setenv("SPELLBOUND_ALLOW_DUPLICATE_DISTRACTORS", "maybe")
    with pytest.raises(ConfigurationError, match="boolean"):
        SessionConfig.from_env()


def test_session_config_rejects_invalid_values() -> None:
    with pytest.raises(ConfigurationError):
        SessionConfig(pool_size=0)
    with pytest.raises(ConfigurationError):
        SessionConfig(alphabet="   ")


def test_dotenv_does_not_override_existing_values(monkeypatch, tmp_path) -> None:
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# local keys\nexport GEMINI_API_KEY='from-file'\nSPELLBOUND_POOL_SIZE=7\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GEMINI_API_KEY", "from-shell")
    monkeypatch.setattr(env_utils, "_DOTENV_LOADED", False)

    try:
        env_utils.load_dotenv(dotenv)

        assert env_utils.getenv_any("GEMINI_API_KEY") == "from-shell"
        assert env_utils.getenv_int("SPELLBOUND_POOL_SIZE", 6) == 7
    finally:
        os.environ.pop("SPELLBOUND_POOL_SIZE", None)


def test_event_jsonl_round_trip(tmp_path) -> None:
    events = [
        RoundEvent.create(EventType.ROUND_START, "session-a", 1, {"difficulty": "EASY"}),
        RoundEvent(EventType.PLACE, "session-a", 1, 1700000000000, {"slot": 1, "tile_id": "tile-3"}),
    ]
    path = tmp_path / "logs" / "events.jsonl"

    write_jsonl(path, events)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[1] == json_dumps(events[1].to_dict())
    assert read_jsonl(path) == events


def test_derive_seed_is_stable_and_separates_parts() -> None:
    assert derive_seed(42, 1) == derive_seed(42, 1)
    assert derive_seed(42, 1) != derive_seed(42, 2)
    assert 0 <= derive_seed("session", 3) < 2**64


def test_action_parsing_and_illegal_action_payload() -> None:
    action = action_from_dict({"type": "DropTile", "slot": 2, "choice_id": " tile-4 "})
    assert action == DropTile(slot=2, tile_id="tile-4")
    assert action_from_dict({"type": "Verify"}) == Verify()

    with pytest.raises(ValueError, match="slot must be an integer"):
        action_from_dict({"type": "ClickSlot", "slot": "2"})
    with pytest.raises(ValueError, match="Malformed"):
        action_from_dict({"type": "RemoveTile"})

    error = IllegalActionError(action, "Puzzle is solved and locked.")
    assert str(error) == "Illegal action DropTile: Puzzle is solved and locked."
    payload = error.to_dict()
    assert payload["type"] == "IllegalActionError"
    assert payload["action"]["tile_id"] == "tile-4"
    assert payload["reason"] == "Puzzle is solved and locked."


def test_action_payload_round_trip_and_unknown_fields() -> None:
    action = DropTile(slot=3, tile_id="tile-9")

    assert action.to_dict() == {"slot": 3, "tile_id": "tile-9", "type": "DropTile"}
    assert action_from_dict(action.to_dict()) == action
    assert Verify().to_dict() == {"type": "Verify"}

    with pytest.raises(ValueError, match="unexpected fields \\['colour'\\]"):
        action_from_dict({"type": "SelectTile", "tile_id": "tile-1", "colour": "red"})


def test_sets_serialize_in_sorted_order() -> None:
    assert json_dumps({"slots": {4, 1, 2}}) == '{"slots":[1,2,4]}'
