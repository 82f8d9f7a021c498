"""
Session manager: the registry of session actors.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Dict, Optional
from storage.base import SessionStore
from utils import SessionLogger, get_logger, generate_session_id, now_ms
from config import settings
from .session_actor import SessionActor

logger = get_logger(__name__)


class SessionManager:
    """
    Maps session IDs to their single SessionActor.

    Responsibilities:
    - Hand out exactly one actor per session ID (created on first access)
    - Allocate and initialize new sessions
    - Drop idle actors from memory; their records stay in the store
    - Lease actors to multi-step requests so they are never evicted mid-request
    """

    def __init__(
        self,
        store: SessionStore,
        clock: Callable[[], int] = now_ms,
        idle_seconds: Optional[int] = None,
        sweep_interval_seconds: Optional[int] = None
    ):
        self.store = store
        self.clock = clock
        self.idle_ms = (idle_seconds or settings.actor_idle_seconds) * 1000
        self.sweep_interval = sweep_interval_seconds or settings.actor_sweep_interval_seconds
        self._actors: Dict[str, SessionActor] = {}
        self._cleanup_task: Optional[asyncio.Task] = None

    async def start(self):
        """Start the background sweep of idle actors."""
        self._cleanup_task = asyncio.create_task(self._evict_idle_actors())

    async def stop(self):
        """Stop the sweep and release the store."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

        self._actors.clear()
        await self.store.close()

    def get_actor(self, session_id: str) -> SessionActor:
        """Get the actor owning ``session_id``, creating it on first access."""
        actor = self._actors.get(session_id)
        if actor is None:
            actor = SessionActor(session_id, self.store, clock=self.clock)
            self._actors[session_id] = actor
        return actor

    @asynccontextmanager
    async def lease(self, session_id: str):
        """
        Hold the session's actor for a multi-step request.

        The actor is not evicted while leased, so every step of the request
        talks to the same actor even if it waits on a slow upstream call.
        """
        actor = self.get_actor(session_id)
        actor.pin()
        try:
            yield actor
        finally:
            actor.unpin()

    async def create_session(self) -> str:
        """
        Allocate a new session and create its record.

        Returns:
            The new session ID
        """
        session_id = generate_session_id()
        await self.get_actor(session_id).init(session_id)

        SessionLogger(session_id).info("Session created")
        return session_id

    def active_actor_count(self) -> int:
        """Number of actors currently held in memory."""
        return len(self._actors)

    def evict_idle(self) -> int:
        """Drop actors idle longer than the threshold. Returns how many."""
        now = self.clock()
        idle = [
            session_id
            for session_id, actor in self._actors.items()
            if not actor.busy and now - actor.last_used > self.idle_ms
        ]
        for session_id in idle:
            del self._actors[session_id]
        return len(idle)

    async def _evict_idle_actors(self):
        """Background task to drop idle actors."""
        while True:
            try:
                await asyncio.sleep(self.sweep_interval)
                evicted = self.evict_idle()
                if evicted:
                    logger.debug(f"Evicted {evicted} idle session actors")

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in actor cleanup: {e}")


# Global session manager instance
_session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        from storage import create_session_store

        _session_manager = SessionManager(create_session_store())
    return _session_manager
