"""Pydantic request schemas for the SpellBound API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CreateSessionRequest(BaseModel):
    """Request body for creating a new puzzle session."""

    seed: int | None = None
    pool_size: int | None = Field(default=None, ge=1)
    allow_duplicate_distractors: bool | None = None
    difficulty: str | None = None


class StartRoundRequest(BaseModel):
    """Request body for starting (or advancing to) a round."""

    difficulty: str | None = None


class SubmitActionRequest(BaseModel):
    """Request body for a player action such as a tap, drop or verify."""

    action: dict[str, Any]
