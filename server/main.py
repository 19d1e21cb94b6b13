"""FastAPI server exposing a local SpellBound API for the browser client."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from puzzle_framework.errors import ConfigurationError, IllegalActionError
from puzzle_framework.serialize import json_dumps
from server.schemas import CreateSessionRequest, StartRoundRequest, SubmitActionRequest
from server.session import SessionStore, view
from spellbound.spellbound_session import PuzzleSession, time_based_seed
from spellbound.spellbound_state import SessionStatus

logger = logging.getLogger(__name__)

app = FastAPI(title="SpellBound Local API", version="0.1.0")
store = SessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok"}


def _get_session(session_id: str) -> PuzzleSession:
    try:
        return store.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown session_id: {session_id}") from exc


def _illegal_detail(session: PuzzleSession, exc: Exception) -> dict[str, Any]:
    # Include refreshed state for convenient UI recovery.
    payload = view(session)
    payload["error"] = str(exc)
    return payload


@app.post("/api/session/new")
def new_session(request: CreateSessionRequest) -> dict:
    """Create a new idle puzzle session."""
    seed = request.seed if request.seed is not None else time_based_seed()
    try:
        session = store.create_session(
            seed=seed,
            pool_size=request.pool_size,
            allow_duplicate_distractors=request.allow_duplicate_distractors,
            difficulty=request.difficulty,
        )
    except (ConfigurationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return view(session)


@app.get("/api/session/{session_id}")
def get_session(session_id: str) -> dict:
    """Return the latest snapshot for a session."""
    return view(_get_session(session_id))


@app.post("/api/session/{session_id}/round")
async def start_round(session_id: str, request: StartRoundRequest) -> dict:
    """Start a round from the start screen, or the next round after solving."""
    session = _get_session(session_id)
    try:
        if session.status is SessionStatus.SOLVED:
            await session.next_round(request.difficulty)
        else:
            await session.start_round(request.difficulty)
    except IllegalActionError as exc:
        raise HTTPException(status_code=400, detail=_illegal_detail(session, exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConfigurationError as exc:
        logger.error("Session %s is misconfigured: %s", session_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return view(session)


@app.post("/api/session/{session_id}/retry")
async def retry_round(session_id: str) -> dict:
    """Retry loading after a puzzle source failure."""
    session = _get_session(session_id)
    try:
        await session.retry()
    except IllegalActionError as exc:
        raise HTTPException(status_code=400, detail=_illegal_detail(session, exc)) from exc
    return view(session)


@app.post("/api/session/{session_id}/leave")
def leave_round(session_id: str) -> dict:
    """Return the session to the start screen."""
    session = _get_session(session_id)
    session.leave()
    return view(session)


@app.post("/api/session/{session_id}/action")
def submit_action(session_id: str, request: SubmitActionRequest) -> dict:
    """Apply one tap, drop, removal or verify request."""
    session = _get_session(session_id)
    try:
        return store.submit_action(session_id, request.action)
    except IllegalActionError as exc:
        raise HTTPException(status_code=400, detail=_illegal_detail(session, exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=_illegal_detail(session, exc)) from exc


@app.get("/api/session/{session_id}/events", response_model=None)
def get_events(session_id: str, format: str = Query(default="array")) -> Any:
    """Return full event history as array (default) or JSONL text."""
    try:
        events = store.all_events(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown session_id: {session_id}") from exc

    if format == "jsonl":
        text = "\n".join(json_dumps(event) for event in events)
        return PlainTextResponse(content=text, media_type="application/jsonl")
    return events


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("server.main:app", host="0.0.0.0", port=8000, reload=True)
