"""
Request and response schemas for the HTTP API.
"""

from pydantic import Field
from typing import Optional, List
from .enums import DifficultyLevel
from .session import CamelModel, Metrics, Turn


class SessionStartResponse(CamelModel):
    """Response after session creation."""
    session_id: str
    message: str = "Study session created successfully"


class ChatRequest(CamelModel):
    """Chat message from the client."""
    session_id: Optional[str] = None
    message: Optional[str] = None


class ChatResponse(CamelModel):
    """Tutor reply to a chat message."""
    response: str
    session_id: str
    suggestions: List[str] = Field(default_factory=list)


class HistoryRequest(CamelModel):
    """Request for a session's conversation history."""
    session_id: Optional[str] = None


class HistoryResponse(CamelModel):
    """Conversation history with the current tier."""
    history: List[Turn]
    difficulty_level: DifficultyLevel


class DifficultyRequest(CamelModel):
    """Manual difficulty override."""
    session_id: Optional[str] = None
    level: Optional[DifficultyLevel] = None


class DifficultyResponse(CamelModel):
    """Confirmation of a difficulty override."""
    message: str = "Difficulty updated successfully"
    level: DifficultyLevel


class ProgressResponse(CamelModel):
    """Progress metrics for a session."""
    metrics: Metrics
    message_count: int
    session_age: int


class HealthResponse(CamelModel):
    """Health check payload."""
    status: str = "healthy"
    timestamp: str
    service: str
    active_sessions: int = 0


class ErrorResponse(CamelModel):
    """Error payload returned for every failed request."""
    error: str
