"""
Core components for the Study Buddy backend.
"""

from .exceptions import (
    StudyBuddyError,
    ValidationError,
    NotFound,
    NotInitialized,
    UpstreamFailure,
    StorageFailure
)
from .understanding_scorer import score_delta
from .state_machine import DifficultyStateMachine, next_difficulty
from .session_actor import SessionActor
from .session_manager import SessionManager, get_session_manager

__all__ = [
    "StudyBuddyError",
    "ValidationError",
    "NotFound",
    "NotInitialized",
    "UpstreamFailure",
    "StorageFailure",
    "score_delta",
    "DifficultyStateMachine",
    "next_difficulty",
    "SessionActor",
    "SessionManager",
    "get_session_manager",
]
