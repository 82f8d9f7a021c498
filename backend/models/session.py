"""
Session data models persisted by the session store.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List
from .enums import DifficultyLevel, Role, MIN_SCORE, MAX_SCORE


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire and on disk."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Turn(CamelModel):
    """Single message stored in session history."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: int  # ms since epoch


class Metrics(CamelModel):
    """Learning progress for a session."""
    total_messages: int = Field(default=0, ge=0)
    topics_discussed: List[str] = Field(default_factory=list)  # Reserved, never populated
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    understanding_score: int = Field(default=0, ge=MIN_SCORE, le=MAX_SCORE)
    last_interaction: int


class SessionState(CamelModel):
    """The whole durable record for one session."""
    session_id: str
    history: List[Turn] = Field(default_factory=list)
    metrics: Metrics
    created_at: int

    @classmethod
    def new(cls, session_id: str, now: int) -> "SessionState":
        """Create a fresh record: no history, score 0, beginner."""
        return cls(
            session_id=session_id,
            metrics=Metrics(last_interaction=now),
            created_at=now
        )


class ProgressSnapshot(CamelModel):
    """Read-only progress view of a session."""
    metrics: Metrics
    message_count: int
    session_age: int  # ms since creation
