"""Structured exceptions used across the puzzle framework."""

from __future__ import annotations

from typing import Any


class SpellboundError(Exception):
    """Base class for framework-level exceptions."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class ConfigurationError(SpellboundError):
    """Raised when a session or pool is configured incorrectly."""


class PuzzleSourceError(SpellboundError):
    """Raised when a puzzle source cannot produce a puzzle."""


class InvalidPuzzleError(PuzzleSourceError):
    """Raised when a puzzle source returns data that breaks the puzzle contract."""


class IllustrationSourceError(SpellboundError):
    """Raised when an illustration source fails to produce an image."""


class IllegalActionError(SpellboundError):
    """Raised when a session command is not accepted in the current state."""

    def __init__(self, action: Any, reason: str | None = None):
        self.action = action
        self.reason = reason
        label = getattr(action, "action_type", None) or str(action)
        message = f"Illegal action {label}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["action"] = getattr(self.action, "to_dict", lambda: self.action)()
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload
