"""
Session actor: the single owner of one session record.

Every operation runs load → mutate → persist under the actor's lock, so two
requests for the same session never interleave their changes. Store I/O is
the only place an operation yields.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, List, Optional, Tuple
from models import (
    DifficultyLevel,
    Metrics,
    ProgressSnapshot,
    Role,
    SessionState,
    Turn,
    MAX_HISTORY,
    MIN_SCORE,
    MAX_SCORE
)
from storage.base import SessionStore
from utils import SessionLogger, now_ms, truncate
from .exceptions import NotFound, NotInitialized
from .state_machine import DifficultyStateMachine
from .understanding_scorer import clamp, score_delta


class SessionActor:
    """
    Owns the SessionState for one session ID.

    Responsibilities:
    - Create the record on init, load it lazily otherwise
    - Append user/assistant turn pairs and keep the last 50
    - Update understanding score and difficulty tier
    - Persist every change before reporting success
    """

    def __init__(
        self,
        session_id: str,
        store: SessionStore,
        clock: Callable[[], int] = now_ms,
        logger: Optional[SessionLogger] = None
    ):
        self.session_id = session_id
        self.store = store
        self.clock = clock
        self.logger = logger or SessionLogger(session_id)

        self._lock = asyncio.Lock()
        self._in_flight = 0
        self._pins = 0
        self._state: Optional[SessionState] = None
        self._loaded = False
        self.last_used = clock()

    @property
    def busy(self) -> bool:
        """True while an operation is running or queued, or a lease is held."""
        return self._in_flight > 0 or self._pins > 0

    def pin(self):
        """Keep the actor resident between operations of one request."""
        self._pins += 1

    def unpin(self):
        self._pins -= 1
        self.last_used = self.clock()

    @asynccontextmanager
    async def _exclusive(self):
        self._in_flight += 1
        try:
            async with self._lock:
                yield
        finally:
            self._in_flight -= 1

    async def init(self, session_id: Optional[str] = None) -> SessionState:
        """
        Bind the session ID, creating the record if none is stored.

        Idempotent: an existing record keeps its history and metrics.
        """
        async with self._exclusive():
            state = await self._load()
            session_id = session_id or self.session_id

            if state is None:
                state = SessionState.new(session_id, self.clock())
                await self._commit(state)
                self.logger.info("Session record created")
            elif state.session_id != session_id:
                state = state.model_copy(update={"session_id": session_id})
                await self._commit(state)

            return state

    async def add_message(self, user_text: str, assistant_text: str) -> Metrics:
        """
        Record one completed exchange and rescore the session.

        Raises:
            NotInitialized: No record exists for this session
            StorageFailure: The record could not be persisted
        """
        async with self._exclusive():
            current = await self._load()
            if current is None:
                raise NotInitialized()

            state = current.model_copy(deep=True)
            timestamp = self.clock()

            state.history.append(Turn(role=Role.USER, content=user_text, timestamp=timestamp))
            state.history.append(Turn(role=Role.ASSISTANT, content=assistant_text, timestamp=timestamp + 1))
            state.history = state.history[-MAX_HISTORY:]

            metrics = state.metrics
            metrics.total_messages += 2
            metrics.last_interaction = timestamp

            delta = score_delta(user_text)
            metrics.understanding_score = clamp(
                metrics.understanding_score + delta, MIN_SCORE, MAX_SCORE
            )

            tiers = DifficultyStateMachine(self.session_id, metrics.difficulty_level, self.logger)
            metrics.difficulty_level = tiers.apply_score(metrics.understanding_score)

            await self._commit(state)

            self.logger.debug(
                f"Exchange recorded: '{truncate(user_text, 40)}' delta={delta:+d} "
                f"score={metrics.understanding_score} tier={metrics.difficulty_level.value}"
            )
            return metrics.model_copy(deep=True)

    async def get_history(self) -> Tuple[List[Turn], DifficultyLevel]:
        """Conversation history and tier; a brand-new session gets ([], beginner)."""
        async with self._exclusive():
            state = await self._load()
            if state is None:
                return [], DifficultyLevel.BEGINNER
            return list(state.history), state.metrics.difficulty_level

    async def get_progress(self) -> ProgressSnapshot:
        """
        Snapshot of the session metrics.

        Raises:
            NotFound: No record exists for this session
        """
        async with self._exclusive():
            state = await self._load()
            if state is None:
                raise NotFound()

            return ProgressSnapshot(
                metrics=state.metrics.model_copy(deep=True),
                message_count=len(state.history),
                session_age=self.clock() - state.created_at
            )

    async def set_difficulty(self, level: DifficultyLevel) -> DifficultyLevel:
        """
        Manually override the tier, bypassing the score thresholds.

        Raises:
            NotInitialized: No record exists for this session
        """
        async with self._exclusive():
            current = await self._load()
            if current is None:
                raise NotInitialized()

            state = current.model_copy(deep=True)
            tiers = DifficultyStateMachine(self.session_id, state.metrics.difficulty_level, self.logger)
            state.metrics.difficulty_level = tiers.force(level)

            await self._commit(state)
            return state.metrics.difficulty_level

    async def _load(self) -> Optional[SessionState]:
        self.last_used = self.clock()
        if not self._loaded:
            self._state = await self.store.load(self.session_id)
            self._loaded = True
        return self._state

    async def _commit(self, state: SessionState):
        # Cached state only changes once the store accepted the new record
        await self.store.save(self.session_id, state)
        self._state = state
