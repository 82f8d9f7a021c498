"""
Shared fixtures for the Study Buddy test suite.
"""

import pytest

from core import SessionActor, SessionManager
from tests.fakes import FakeClock, FlakyStore


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return FlakyStore()


@pytest.fixture
def make_actor(store, clock):
    """Factory for actors sharing the test store and clock."""
    def _make(session_id: str = "session_test_abc123") -> SessionActor:
        return SessionActor(session_id, store, clock=clock)
    return _make


@pytest.fixture
def manager(store, clock):
    return SessionManager(store, clock=clock, idle_seconds=60, sweep_interval_seconds=1)
