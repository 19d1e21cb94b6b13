"""In-memory puzzle session management for the local API."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from spellbound.config import SessionConfig
from spellbound.sources.illustration_sources import build_illustration_source
from spellbound.sources.puzzle_sources import build_puzzle_source
from spellbound.spellbound_actions import ActionType, action_from_dict
from spellbound.spellbound_session import PuzzleSession
from spellbound.spellbound_state import SessionStatus, parse_difficulty

PLAYER_ACTION_TYPES = [action_type.value for action_type in ActionType]


def _legal_commands(session: PuzzleSession) -> list[str]:
    """Return the commands the session accepts in its current status."""
    status = session.status
    if status is SessionStatus.ACTIVE:
        return list(PLAYER_ACTION_TYPES) + ["Leave"]
    if status is SessionStatus.SOLVED:
        return ["NextRound", "Leave"]
    if status is SessionStatus.FAILED:
        return ["Retry", "Leave"]
    if status is SessionStatus.IDLE:
        return ["StartRound"]
    return ["Leave"]


def view(session: PuzzleSession) -> dict[str, Any]:
    """Return the API payload for a session."""
    return {
        "session_id": session.session_id,
        "observation": session.observe().to_dict(),
        "legal_commands": _legal_commands(session),
        "meta": {
            "seed": session.seed,
            "round_id": session.round_id,
            "status": session.status.value,
            "difficulty": session.difficulty.value,
            "pool_size": session.config.pool_size,
            "allow_duplicate_distractors": session.config.allow_duplicate_distractors,
            "event_count": len(session.events),
        },
    }


class SessionStore:
    """In-memory session dictionary keyed by session ID."""

    def __init__(self) -> None:
        self._sessions: dict[str, PuzzleSession] = {}

    def create_session(
        self,
        *,
        seed: int,
        pool_size: int | None = None,
        allow_duplicate_distractors: bool | None = None,
        difficulty: str | None = None,
    ) -> PuzzleSession:
        config = SessionConfig.from_env(
            pool_size=pool_size,
            allow_duplicate_distractors=allow_duplicate_distractors,
            default_difficulty=parse_difficulty(difficulty) if difficulty is not None else None,
        )
        session = PuzzleSession(
            puzzle_source=build_puzzle_source(seed=seed),
            illustration_source=build_illustration_source(),
            config=config,
            seed=seed,
            session_id=f"session-{uuid4().hex[:10]}",
        )
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> PuzzleSession:
        if session_id not in self._sessions:
            raise KeyError(session_id)
        return self._sessions[session_id]

    def all_events(self, session_id: str) -> list[dict[str, Any]]:
        session = self.get(session_id)
        return [event.to_dict() for event in session.events]

    def submit_action(self, session_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        session = self.get(session_id)
        session.apply(action_from_dict(payload))
        return view(session)
