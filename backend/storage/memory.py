"""
In-memory session store for development and tests.
"""

from typing import Dict, Optional
from pydantic import ValidationError as SchemaError
from models import SessionState
from core.exceptions import StorageFailure
from .base import SessionStore


class InMemorySessionStore(SessionStore):
    """
    Keeps serialized records in a dict.

    Records are stored as JSON so callers never share a mutable object with
    the store, the same as with a real backend.
    """

    def __init__(self):
        self._records: Dict[str, str] = {}

    async def load(self, key: str) -> Optional[SessionState]:
        raw = self._records.get(key)
        if raw is None:
            return None
        try:
            return SessionState.model_validate_json(raw)
        except SchemaError as e:
            raise StorageFailure(f"Corrupt session record for {key}: {e}") from e

    async def save(self, key: str, state: SessionState) -> None:
        self._records[key] = state.model_dump_json(by_alias=True)

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)
