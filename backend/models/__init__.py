"""
Data models for the Study Buddy backend.
"""

from .enums import (
    Role,
    DifficultyLevel,
    MAX_HISTORY,
    PROMPT_HISTORY_WINDOW,
    MIN_SCORE,
    MAX_SCORE,
    MIN_DELTA,
    MAX_DELTA
)

from .messages import (
    SessionStartResponse,
    ChatRequest,
    ChatResponse,
    HistoryRequest,
    HistoryResponse,
    DifficultyRequest,
    DifficultyResponse,
    ProgressResponse,
    HealthResponse,
    ErrorResponse
)

from .session import (
    CamelModel,
    Turn,
    Metrics,
    SessionState,
    ProgressSnapshot
)

__all__ = [
    # Enums and constants
    "Role",
    "DifficultyLevel",
    "MAX_HISTORY",
    "PROMPT_HISTORY_WINDOW",
    "MIN_SCORE",
    "MAX_SCORE",
    "MIN_DELTA",
    "MAX_DELTA",

    # Messages
    "SessionStartResponse",
    "ChatRequest",
    "ChatResponse",
    "HistoryRequest",
    "HistoryResponse",
    "DifficultyRequest",
    "DifficultyResponse",
    "ProgressResponse",
    "HealthResponse",
    "ErrorResponse",

    # Session
    "CamelModel",
    "Turn",
    "Metrics",
    "SessionState",
    "ProgressSnapshot",
]
