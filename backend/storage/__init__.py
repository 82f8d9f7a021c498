"""
Session persistence for the Study Buddy backend.
"""

from config import settings, StoreBackend
from utils import get_logger
from .base import SessionStore
from .memory import InMemorySessionStore
from .file import JsonFileSessionStore

logger = get_logger(__name__)


def create_session_store() -> SessionStore:
    """Build the session store selected in settings."""
    if settings.session_store == StoreBackend.FILE:
        logger.info(f"Using JSON file session store at {settings.session_store_dir}")
        return JsonFileSessionStore(settings.session_store_dir)

    logger.info("Using in-memory session store")
    return InMemorySessionStore()


__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "JsonFileSessionStore",
    "create_session_store",
]
