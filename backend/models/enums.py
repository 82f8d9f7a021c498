"""
Enums and constants for the Study Buddy backend.
"""

from enum import Enum


class Role(str, Enum):
    """Author of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"


class DifficultyLevel(str, Enum):
    """Tutoring difficulty tiers, lowest first."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# History bounds
MAX_HISTORY = 50            # Turns kept in a session record
PROMPT_HISTORY_WINDOW = 10  # Turns sent to the model (5 exchanges)

# Understanding score bounds
MIN_SCORE = 0
MAX_SCORE = 100

# Per-message score delta bounds
MIN_DELTA = -12
MAX_DELTA = 15
