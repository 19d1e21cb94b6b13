"""Tap-to-place selection tracking."""

from __future__ import annotations

from .assignment import AssignmentStore


class SelectionController:
    """Tracks the single tile armed by a tap, for the select-then-place modality."""

    def __init__(self, assignments: AssignmentStore):
        self._assignments = assignments
        self._selected: str | None = None

    @property
    def selected(self) -> str | None:
        return self._selected

    def select(self, tile_id: str) -> str | None:
        """Toggle selection of an unplaced tile and return the new selection.

        Placed tiles are not selectable.
        """
        if self._assignments.is_placed(tile_id):
            return self._selected
        self._selected = None if self._selected == tile_id else tile_id
        return self._selected

    def consume_selection(self) -> str | None:
        """Return the armed tile and clear the selection."""
        selected, self._selected = self._selected, None
        return selected

    def clear(self) -> None:
        self._selected = None
