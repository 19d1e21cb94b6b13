"""Puzzle session: one player's rounds, from loading through verification."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import random
import time
from typing import Any
from uuid import uuid4

from puzzle_framework.action import Action
from puzzle_framework.errors import (
    ConfigurationError,
    IllegalActionError,
    InvalidPuzzleError,
    PuzzleSourceError,
    SpellboundError,
)
from puzzle_framework.events import EventType, RoundEvent, write_jsonl
from puzzle_framework.serialize import derive_seed

from .assignment import AssignmentStore
from .choice_pool import ChoicePoolBuilder
from .config import SessionConfig
from .selection import SelectionController
from .sources.illustration_sources import IllustrationSource
from .sources.puzzle_sources import PuzzleSource
from .spellbound_actions import ClickSlot, DropTile, RemoveTile, SelectTile, Verify
from .spellbound_observation import RoundObservation, SlotView, TileView
from .spellbound_state import (
    ChoicePool,
    Difficulty,
    Feedback,
    IllustrationState,
    Puzzle,
    SessionStatus,
    parse_difficulty,
)
from .verifier import VerificationResult, check

logger = logging.getLogger(__name__)

Listener = Callable[[RoundObservation], None]

ROUND_START_STATUSES = {SessionStatus.IDLE, SessionStatus.SOLVED, SessionStatus.FAILED}


def time_based_seed() -> int:
    """Return a positive time-derived seed for sessions created without one."""
    seed = int(time.time_ns() & 0x7FFFFFFF)
    return seed if seed != 0 else 1


class PuzzleSession:
    """Owns the puzzle, pool, assignment, selection and status of the current round.

    Every command runs to completion synchronously except the two source
    calls. Results of those calls are tagged with the round id they were
    requested for and dropped if the session has moved on by the time they
    arrive.
    """

    def __init__(
        self,
        puzzle_source: PuzzleSource,
        illustration_source: IllustrationSource,
        *,
        config: SessionConfig | None = None,
        seed: int | None = None,
        session_id: str | None = None,
        pool_builder: ChoicePoolBuilder | None = None,
    ):
        self.config = config or SessionConfig()
        self.puzzle_source = puzzle_source
        self.illustration_source = illustration_source
        self.session_id = session_id or f"session-{uuid4().hex[:10]}"
        self.seed = seed if seed is not None else time_based_seed()
        self.pool_builder = pool_builder or ChoicePoolBuilder(
            allow_duplicate_distractors=self.config.allow_duplicate_distractors
        )

        self.status = SessionStatus.IDLE
        self.difficulty: Difficulty = self.config.default_difficulty
        self.round_id = 0
        self.puzzle: Puzzle | None = None
        self.pool: ChoicePool | None = None
        self.assignments = AssignmentStore()
        self.selection = SelectionController(self.assignments)
        self.last_result: VerificationResult | None = None
        self.illustration_url: str | None = None
        self.illustration_state: IllustrationState | None = None
        self.error_message: str | None = None
        self.events: list[RoundEvent] = []

        self._listeners: list[Listener] = []
        self._illustration_task: asyncio.Task[None] | None = None

    # -- lifecycle -----------------------------------------------------------------

    async def start_round(self, difficulty: Difficulty | str | None = None) -> RoundObservation:
        """Load a new puzzle and make it playable.

        Allowed from idle, solved and failed. A source failure leaves the
        session failed with no puzzle or pool.
        """
        if self.status not in ROUND_START_STATUSES:
            raise self._illegal("StartRound", f"Cannot start a round while {self.status.value}.")
        self.difficulty = parse_difficulty(difficulty, self.difficulty)
        self.round_id += 1
        round_id = self.round_id

        self._reset_round()
        self.status = SessionStatus.LOADING
        self._record(EventType.ROUND_START, {"difficulty": self.difficulty.value})
        self._notify()

        try:
            puzzle = await self._fetch_puzzle()
        except PuzzleSourceError as exc:
            if self._is_stale_load(round_id):
                logger.debug("Dropping puzzle failure for stale round %s: %s", round_id, exc)
                return self.observe()
            self._fail_round(exc)
            return self.observe()

        if self._is_stale_load(round_id):
            logger.debug("Dropping puzzle for stale round %s.", round_id)
            return self.observe()

        rng = random.Random(derive_seed(self.seed, round_id))
        try:
            pool = self.pool_builder.build(puzzle, self.config.pool_size, self.config.alphabet, rng=rng)
        except ConfigurationError as exc:
            self._fail_round(exc)
            raise

        self.puzzle = puzzle
        self.pool = pool
        self.status = SessionStatus.ACTIVE
        self.illustration_state = IllustrationState.PENDING
        self._record(
            EventType.ROUND_READY,
            {
                "difficulty": self.difficulty.value,
                "word_length": len(puzzle.word),
                "missing_positions": list(puzzle.missing_positions),
                "pool_size": len(pool),
                "puzzle_digest": puzzle.model_digest(),
                "pool_digest": pool.model_digest(),
            },
        )
        self._illustration_task = asyncio.create_task(
            self._attach_illustration(round_id, puzzle.word),
            name=f"{self.session_id}-illustration-{round_id}",
        )
        self._notify()
        return self.observe()

    async def next_round(self, difficulty: Difficulty | str | None = None) -> RoundObservation:
        """Start the round after a solved one."""
        if self.status is not SessionStatus.SOLVED:
            raise self._illegal("NextRound", "The current puzzle is not solved yet.")
        return await self.start_round(difficulty)

    async def retry(self) -> RoundObservation:
        """Reload after a puzzle source failure, keeping the chosen difficulty."""
        if self.status is not SessionStatus.FAILED:
            raise self._illegal("Retry", "Only a failed round can be retried.")
        return await self.start_round(self.difficulty)

    def leave(self) -> RoundObservation:
        """Return to the start screen, abandoning the current round."""
        if self.status is SessionStatus.IDLE:
            return self.observe()
        self._reset_round()
        self.status = SessionStatus.IDLE
        self._record(EventType.LEAVE, {})
        self._notify()
        return self.observe()

    async def wait_for_illustration(self) -> None:
        """Await the outstanding illustration request, if any."""
        task = self._illustration_task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    # -- player commands -----------------------------------------------------------

    def select_tile(self, tile_id: str) -> RoundObservation:
        return self.apply(SelectTile(tile_id=tile_id))

    def click_slot(self, slot: int) -> RoundObservation:
        return self.apply(ClickSlot(slot=slot))

    def drop_tile(self, slot: int, tile_id: str) -> RoundObservation:
        return self.apply(DropTile(slot=slot, tile_id=tile_id))

    def remove_tile(self, slot: int) -> RoundObservation:
        return self.apply(RemoveTile(slot=slot))

    def verify(self) -> RoundObservation:
        return self.apply(Verify())

    def is_legal(self, action: Action) -> tuple[bool, str | None]:
        """Return whether the session accepts an action now, with a reason when not."""
        if self.status is SessionStatus.SOLVED:
            return False, "Puzzle is solved and locked."
        if self.status is not SessionStatus.ACTIVE or self.puzzle is None or self.pool is None:
            return False, f"No active puzzle (status is {self.status.value})."

        slot = getattr(action, "slot", None)
        if slot is not None and not self.puzzle.is_missing(slot):
            return False, f"Position {slot} is not a hidden letter slot."
        tile_id = getattr(action, "tile_id", None)
        if tile_id is not None and tile_id not in self.pool:
            return False, f"Tile {tile_id!r} is not in this round's pool."
        if not isinstance(action, (SelectTile, ClickSlot, DropTile, RemoveTile, Verify)):
            return False, f"Unsupported action {type(action).__name__}."
        return True, None

    def apply(self, action: Action) -> RoundObservation:
        """Validate and execute one player action, returning the new snapshot."""
        legal, reason = self.is_legal(action)
        if not legal:
            raise self._illegal(action, reason)

        if isinstance(action, SelectTile):
            selected = self.selection.select(action.tile_id)
            self._record(EventType.SELECT, {"tile_id": action.tile_id, "selected": selected})
        elif isinstance(action, ClickSlot):
            armed = self.selection.consume_selection()
            if armed is not None:
                self._place(action.slot, armed, via="tap")
            elif self.assignments.occupant_of(action.slot) is not None:
                self._remove(action.slot)
        elif isinstance(action, DropTile):
            self.selection.clear()
            self._place(action.slot, action.tile_id, via="drag")
        elif isinstance(action, RemoveTile):
            self._remove(action.slot)
        else:
            self._verify()

        self._notify()
        return self.observe()

    def _place(self, slot: int, tile_id: str, *, via: str) -> None:
        displaced = self.assignments.place(slot, tile_id)
        self.last_result = None
        self._record(EventType.PLACE, {"slot": slot, "tile_id": tile_id, "displaced": displaced, "via": via})

    def _remove(self, slot: int) -> None:
        removed = self.assignments.remove(slot)
        self.last_result = None
        self._record(EventType.REMOVE, {"slot": slot, "tile_id": removed})

    def _verify(self) -> None:
        assert self.puzzle is not None and self.pool is not None
        result = check(self.puzzle, self.pool, self.assignments.snapshot())
        self.last_result = result
        self._record(EventType.VERIFY, result.to_dict())
        if result.correct:
            self.status = SessionStatus.SOLVED
            self.selection.clear()
            self._record(EventType.SOLVED, {"word": self.puzzle.word})

    # -- observation ---------------------------------------------------------------

    @property
    def feedback(self) -> Feedback:
        return self.last_result.feedback if self.last_result is not None else Feedback.NONE

    def observe(self) -> RoundObservation:
        """Return a render-ready snapshot of the session."""
        slots: list[SlotView] = []
        pool: list[TileView] = []
        if self.puzzle is not None and self.pool is not None:
            for position, letter in enumerate(self.puzzle.word):
                if not self.puzzle.is_missing(position):
                    slots.append(SlotView(position=position, missing=False, letter=letter))
                    continue
                tile_id = self.assignments.occupant_of(position)
                tile = self.pool.get(tile_id) if tile_id is not None else None
                slots.append(
                    SlotView(
                        position=position,
                        missing=True,
                        letter=tile.letter if tile is not None else None,
                        tile_id=tile_id,
                    )
                )
            pool = [
                TileView(
                    id=tile.id,
                    letter=tile.letter,
                    used=self.assignments.is_placed(tile.id),
                    selected=self.selection.selected == tile.id,
                )
                for tile in self.pool
            ]

        solved = self.status is SessionStatus.SOLVED
        return RoundObservation(
            session_id=self.session_id,
            round_id=self.round_id,
            status=self.status,
            difficulty=self.difficulty,
            hint=self.puzzle.hint if self.puzzle is not None else None,
            slots=tuple(slots),
            pool=tuple(pool),
            selected_tile_id=self.selection.selected,
            feedback=self.feedback,
            slot_results=dict(self.last_result.slot_results) if self.last_result is not None else {},
            can_verify=(
                self.status is SessionStatus.ACTIVE
                and self.puzzle is not None
                and self.assignments.is_complete(self.puzzle.missing_positions)
            ),
            locked=solved,
            illustration_url=self.illustration_url,
            illustration_state=self.illustration_state,
            error_message=self.error_message,
            word=self.puzzle.word if solved and self.puzzle is not None else None,
            assignment=dict(self.assignments.snapshot()),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a snapshot listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def export_events(self, path: Any) -> None:
        """Write the session history as JSONL."""
        write_jsonl(path, self.events)

    # -- internals -----------------------------------------------------------------

    async def _attach_illustration(self, round_id: int, word: str) -> None:
        try:
            url = await self.illustration_source.fetch_illustration(word)
        except Exception as exc:
            # Illustrations are decorative; any failure just leaves the round without one.
            logger.warning("Illustration for round %s unavailable: %s", round_id, exc)
            url = None

        if round_id != self.round_id or self.puzzle is None:
            logger.debug("Discarding illustration for stale round %s.", round_id)
            return

        self.illustration_url = url
        self.illustration_state = IllustrationState.READY if url else IllustrationState.UNAVAILABLE
        self._record(EventType.ILLUSTRATION, {"available": url is not None})
        self._notify()

    async def _fetch_puzzle(self) -> Puzzle:
        try:
            puzzle = await self.puzzle_source.fetch_puzzle(self.difficulty)
        except PuzzleSourceError:
            raise
        except Exception as exc:
            logger.warning("Puzzle source raised %s: %s", type(exc).__name__, exc)
            raise PuzzleSourceError(f"Puzzle source failed with {type(exc).__name__}: {exc}") from exc
        if not isinstance(puzzle, Puzzle):
            raise InvalidPuzzleError(f"Puzzle source returned {type(puzzle).__name__}, expected Puzzle.")
        return puzzle

    def _fail_round(self, exc: SpellboundError) -> None:
        self.status = SessionStatus.FAILED
        self.error_message = self.config.error_message
        self._record(EventType.ROUND_FAILED, {"error": exc.to_dict()})
        self._notify()

    def _is_stale_load(self, round_id: int) -> bool:
        return round_id != self.round_id or self.status is not SessionStatus.LOADING

    def _reset_round(self) -> None:
        self.puzzle = None
        self.pool = None
        self.assignments.clear()
        self.selection.clear()
        self.last_result = None
        self.illustration_url = None
        self.illustration_state = None
        self.error_message = None

    def _illegal(self, action: Action | str, reason: str | None) -> IllegalActionError:
        error = IllegalActionError(action, reason)
        payload = action.to_dict() if isinstance(action, Action) else {"type": action}
        self._record(EventType.ILLEGAL_ACTION, {"action": payload, "reason": reason})
        return error

    def _record(self, event_type: EventType, payload: dict[str, Any]) -> None:
        self.events.append(RoundEvent.create(event_type, self.session_id, self.round_id, payload))

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.observe()
        for listener in list(self._listeners):
            listener(snapshot)
