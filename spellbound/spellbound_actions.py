"""Player commands accepted by a puzzle session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from puzzle_framework.action import Action


class ActionType(str, Enum):
    """Supported SpellBound action discriminators."""

    SELECT_TILE = "SelectTile"
    CLICK_SLOT = "ClickSlot"
    DROP_TILE = "DropTile"
    REMOVE_TILE = "RemoveTile"
    VERIFY = "Verify"


def _require_tile_id(value: Any, owner: str) -> str:
    normalized = str(value).strip() if value is not None else ""
    if not normalized:
        raise ValueError(f"{owner}.tile_id must be non-empty.")
    return normalized


def _require_slot(value: Any, owner: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{owner}.slot must be an integer.")
    return value


@dataclass(frozen=True)
class SelectTile(Action):
    """Tap a pool tile to arm (or disarm) it."""

    tile_id: str
    action_type = ActionType.SELECT_TILE.value

    def __post_init__(self) -> None:
        object.__setattr__(self, "tile_id", _require_tile_id(self.tile_id, "SelectTile"))


@dataclass(frozen=True)
class ClickSlot(Action):
    """Tap a slot: place the armed tile there, or empty the slot."""

    slot: int
    action_type = ActionType.CLICK_SLOT.value

    def __post_init__(self) -> None:
        _require_slot(self.slot, "ClickSlot")


@dataclass(frozen=True)
class DropTile(Action):
    """Drag a tile onto a slot."""

    slot: int
    tile_id: str
    action_type = ActionType.DROP_TILE.value

    def __post_init__(self) -> None:
        _require_slot(self.slot, "DropTile")
        object.__setattr__(self, "tile_id", _require_tile_id(self.tile_id, "DropTile"))


@dataclass(frozen=True)
class RemoveTile(Action):
    """Empty a slot explicitly."""

    slot: int
    action_type = ActionType.REMOVE_TILE.value

    def __post_init__(self) -> None:
        _require_slot(self.slot, "RemoveTile")


@dataclass(frozen=True)
class Verify(Action):
    """Ask whether the filled-in word is correct."""

    action_type = ActionType.VERIFY.value


def action_from_dict(data: Mapping[str, Any]) -> Action:
    """Parse a SpellBound action from a JSON payload."""
    try:
        return _parse_action(data)
    except TypeError as exc:
        raise ValueError(f"Malformed SpellBound action payload: {exc}") from exc


def _parse_action(data: Mapping[str, Any]) -> Action:
    action_type = data.get("type") or data.get("action_type")
    if action_type == ActionType.SELECT_TILE.value:
        return SelectTile.from_dict(data)
    if action_type == ActionType.CLICK_SLOT.value:
        return ClickSlot.from_dict(data)
    if action_type == ActionType.DROP_TILE.value:
        if "tile_id" not in data and "choice_id" in data:
            translated = dict(data)
            translated["tile_id"] = translated.pop("choice_id")
            return DropTile.from_dict(translated)
        return DropTile.from_dict(data)
    if action_type == ActionType.REMOVE_TILE.value:
        return RemoveTile.from_dict(data)
    if action_type == ActionType.VERIFY.value:
        return Verify()
    raise ValueError(f"Unknown SpellBound action type: {action_type!r}")
