"""Immutable value objects shared by puzzles, pools and session snapshots."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Self

from .serialize import digest, to_serializable


@dataclass(frozen=True)
class Model:
    """Frozen dataclass base that serializes through `to_serializable`.

    Subclasses whose wire format renames or nests fields override `from_dict`.
    """

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return to_serializable(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build an instance from serialized data, ignoring unknown keys."""
        known = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})  # type: ignore[misc]

    def model_digest(self) -> str:
        """Return a deterministic digest for event logs."""
        return digest(self.to_dict())
