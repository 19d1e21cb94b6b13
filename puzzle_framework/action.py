"""Player commands as typed, serializable values."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Mapping, Self

from .serialize import to_serializable

_DISCRIMINATOR_KEYS = frozenset({"type", "action_type"})


@dataclass(frozen=True)
class Action:
    """A command from the presentation layer, tagged by `action_type` on the wire."""

    action_type: ClassVar[str] = "Action"

    def to_dict(self) -> dict[str, Any]:
        """Return the action's fields plus its `type` discriminator."""
        payload = {field.name: to_serializable(getattr(self, field.name)) for field in fields(self)}
        payload["type"] = self.action_type
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build the action from a payload; unknown or missing fields raise `TypeError`."""
        known = {field.name for field in fields(cls)}
        unexpected = sorted(set(data) - known - _DISCRIMINATOR_KEYS)
        if unexpected:
            raise TypeError(f"{cls.action_type} got unexpected fields {unexpected}.")
        return cls(**{name: data[name] for name in known if name in data})
