"""
Session store port.

A store holds exactly one SessionState record per session key. Only the
owning SessionActor reads or writes a given key.
"""

from abc import ABC, abstractmethod
from typing import Optional
from models import SessionState


class SessionStore(ABC):
    """Typed key-value persistence for session records."""

    @abstractmethod
    async def load(self, key: str) -> Optional[SessionState]:
        """
        Load a session record.

        Returns:
            The stored record, or None if the key has never been saved

        Raises:
            StorageFailure: The backend could not be read
        """

    @abstractmethod
    async def save(self, key: str, state: SessionState) -> None:
        """
        Durably store a session record, replacing any previous one.

        Raises:
            StorageFailure: The backend could not be written
        """

    async def close(self) -> None:
        """Release backend resources."""
