"""
JSON file session store.

One document per session under a directory. Writes go to a temp file that
is renamed over the target, so a crash never leaves a half-written record.
"""

import asyncio
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Optional
from pydantic import ValidationError as SchemaError
from models import SessionState
from core.exceptions import StorageFailure
from utils import get_logger, is_valid_session_id
from .base import SessionStore

logger = get_logger(__name__)


class JsonFileSessionStore(SessionStore):
    """Durable store writing ``<dir>/<key>.json`` files."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """File path for a session key; foreign key formats are hashed."""
        if is_valid_session_id(key):
            name = key
        else:
            name = "key_" + hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{name}.json"

    async def load(self, key: str) -> Optional[SessionState]:
        path = self.path_for(key)
        try:
            raw = await asyncio.to_thread(self._read, path)
        except OSError as e:
            logger.error(f"Failed to read session record {path}: {e}")
            raise StorageFailure(f"Failed to read session {key}") from e

        if raw is None:
            return None

        try:
            return SessionState.model_validate_json(raw)
        except SchemaError as e:
            logger.error(f"Corrupt session record {path}: {e}")
            raise StorageFailure(f"Corrupt session record for {key}") from e

    async def save(self, key: str, state: SessionState) -> None:
        path = self.path_for(key)
        payload = state.model_dump_json(by_alias=True)
        try:
            await asyncio.to_thread(self._write, path, payload)
        except OSError as e:
            logger.error(f"Failed to write session record {path}: {e}")
            raise StorageFailure(f"Failed to save session {key}") from e

    @staticmethod
    def _read(path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @staticmethod
    def _write(path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
