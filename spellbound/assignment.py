"""Authoritative slot-to-tile mapping for the current round."""

from __future__ import annotations

from typing import Iterable, Mapping


class AssignmentStore:
    """Maps slot positions to tile ids with at most one slot per tile.

    Operations are total: callers are expected to pass slots from the puzzle's
    missing positions and ids from the round's pool.
    """

    def __init__(self) -> None:
        self._slots: dict[int, str] = {}

    def place(self, slot: int, tile_id: str) -> str | None:
        """Bind `tile_id` to `slot` and return the tile it displaced, if any.

        A tile already sitting in another slot is moved, so it never appears
        twice. The previous occupant of `slot` becomes unplaced.
        """
        previous_slot = self.slot_of(tile_id)
        if previous_slot is not None and previous_slot != slot:
            del self._slots[previous_slot]
        displaced = self._slots.get(slot)
        self._slots[slot] = tile_id
        return displaced if displaced != tile_id else None

    def remove(self, slot: int) -> str | None:
        """Unbind `slot` and return the tile it held; no-op when empty."""
        return self._slots.pop(slot, None)

    def clear(self) -> None:
        self._slots.clear()

    def is_placed(self, tile_id: str) -> bool:
        return tile_id in self._slots.values()

    def occupant_of(self, slot: int) -> str | None:
        return self._slots.get(slot)

    def slot_of(self, tile_id: str) -> int | None:
        """Return the slot holding `tile_id`, if it is placed."""
        for slot, occupant in self._slots.items():
            if occupant == tile_id:
                return slot
        return None

    def is_complete(self, missing_positions: Iterable[int]) -> bool:
        """Return whether every required slot is bound."""
        return all(position in self._slots for position in missing_positions)

    def snapshot(self) -> Mapping[int, str]:
        """Return a copy of the current mapping."""
        return dict(sorted(self._slots.items()))

    def __len__(self) -> int:
        return len(self._slots)
