"""
Small helpers shared across the backend.
"""

import re
import time
import secrets

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_SESSION_ID_PATTERN = re.compile(r"^session_[a-z0-9]+_[a-z0-9]+$")


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_session_id() -> str:
    """
    Generate a unique session ID.

    Format: session_<base36 ms timestamp>_<base36 random>
    """
    timestamp = to_base36(now_ms())
    random_part = "".join(secrets.choice(_BASE36) for _ in range(13))
    return f"session_{timestamp}_{random_part}"


def is_valid_session_id(session_id: str) -> bool:
    """Check that a session ID has the generated format."""
    return bool(_SESSION_ID_PATTERN.match(session_id))


def truncate(text: str, max_length: int = 80) -> str:
    """Truncate text to a maximum length, marking the cut with '...'."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."
