"""
Difficulty state machine driven by the understanding score.

Raising a tier needs a higher score than keeping it, so a score hovering
near a boundary does not flap between tiers:
- Climbing: beginner → intermediate above 30, intermediate → advanced above 60
- Falling: advanced → intermediate below 55, intermediate → beginner below 25
"""

from typing import Optional
from models import DifficultyLevel
from utils import SessionLogger

PROMOTE_TO_ADVANCED = 60
PROMOTE_TO_INTERMEDIATE = 30
DEMOTE_FROM_ADVANCED = 55
DEMOTE_TO_BEGINNER = 25


def next_difficulty(current: DifficultyLevel, score: int) -> DifficultyLevel:
    """
    Decide the tier after a score update.

    At most one step per update: beginner never jumps to advanced and
    advanced never drops to beginner.
    """
    if current == DifficultyLevel.INTERMEDIATE and score > PROMOTE_TO_ADVANCED:
        return DifficultyLevel.ADVANCED
    if current == DifficultyLevel.BEGINNER and score > PROMOTE_TO_INTERMEDIATE:
        return DifficultyLevel.INTERMEDIATE
    if current == DifficultyLevel.ADVANCED and score < DEMOTE_FROM_ADVANCED:
        return DifficultyLevel.INTERMEDIATE
    if current == DifficultyLevel.INTERMEDIATE and score < DEMOTE_TO_BEGINNER:
        return DifficultyLevel.BEGINNER
    return current


class DifficultyStateMachine:
    """
    Tracks the tier of one session and applies score-driven transitions.

    State Transitions:
    BEGINNER → INTERMEDIATE (score > 30)
    INTERMEDIATE → ADVANCED (score > 60)
    ADVANCED → INTERMEDIATE (score < 55)
    INTERMEDIATE → BEGINNER (score < 25)
    ANY → ANY (manual override via force())
    """

    def __init__(
        self,
        session_id: str,
        initial: DifficultyLevel = DifficultyLevel.BEGINNER,
        logger: Optional[SessionLogger] = None
    ):
        self.session_id = session_id
        self.logger = logger or SessionLogger(session_id)
        self._state = initial

    @property
    def state(self) -> DifficultyLevel:
        """Get current tier."""
        return self._state

    def apply_score(self, score: int) -> DifficultyLevel:
        """Run the hysteresis rule against a freshly updated score."""
        new_state = next_difficulty(self._state, score)
        if new_state != self._state:
            self.logger.info(f"Difficulty {self._state.value} → {new_state.value} (score={score})")
        self._state = new_state
        return self._state

    def force(self, level: DifficultyLevel) -> DifficultyLevel:
        """Manual override that bypasses the score thresholds."""
        self.logger.info(f"Difficulty manually set to {level.value}")
        self._state = level
        return self._state
