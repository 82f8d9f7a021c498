"""
Utility modules for the Study Buddy backend.
"""

from .logger import setup_logging, get_logger, SessionLogger
from .helpers import (
    now_ms,
    to_base36,
    generate_session_id,
    is_valid_session_id,
    truncate
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "SessionLogger",

    # Helpers
    "now_ms",
    "to_base36",
    "generate_session_id",
    "is_valid_session_id",
    "truncate",
]
