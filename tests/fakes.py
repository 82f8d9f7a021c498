"""
Test doubles shared across the suite.
"""

from core import StorageFailure
from services import FALLBACK_RESPONSE, TutorReply
from storage import InMemorySessionStore


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class FlakyStore(InMemorySessionStore):
    """In-memory store whose writes can be switched off."""

    def __init__(self):
        super().__init__()
        self.fail_saves = False
        self.fail_loads = False
        self.saves = 0

    async def load(self, key):
        if self.fail_loads:
            raise StorageFailure(f"Failed to read session {key}")
        return await super().load(key)

    async def save(self, key, state):
        if self.fail_saves:
            raise StorageFailure(f"Failed to save session {key}")
        self.saves += 1
        await super().save(key, state)


class FakeTutor:
    """Stands in for TutorService; records what it was asked."""

    def __init__(self, reply: str = "Recursion is a function calling itself."):
        self.reply = reply
        self.fail = False
        self.calls = []

    async def respond(self, message, history, level):
        self.calls.append((message, list(history), level))
        if self.fail:
            return TutorReply(text=FALLBACK_RESPONSE, is_fallback=True)
        return TutorReply(text=self.reply)

    async def cleanup(self):
        pass
