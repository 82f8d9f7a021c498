"""
Service integrations for the Study Buddy backend.
"""

from .tutor_service import (
    TutorService,
    TutorReply,
    FALLBACK_RESPONSE,
    SYSTEM_PROMPTS,
    system_prompt_for,
    format_history,
    build_messages,
    suggest_follow_ups,
    get_tutor_service,
    validate_tutor_config
)

__all__ = [
    "TutorService",
    "TutorReply",
    "FALLBACK_RESPONSE",
    "SYSTEM_PROMPTS",
    "system_prompt_for",
    "format_history",
    "build_messages",
    "suggest_follow_ups",
    "get_tutor_service",
    "validate_tutor_config",
]
