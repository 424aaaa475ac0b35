"""Shared test fixtures for Code Pulse tests."""

import pytest

from code_pulse.tracking.models import Snapshot

START_TIME = 1_700_000_000.0  # 2023-11-14 22:13:20 UTC


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = START_TIME):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def advance_minutes(self, minutes: float) -> None:
        self.now += minutes * 60


class MemoryStore:
    """In-memory SnapshotStore that records every save."""

    def __init__(self, snapshot=None, fail_with=None):
        self.snapshot = snapshot or Snapshot()
        self.saved = []
        self.fail_with = fail_with

    def load_snapshot(self):
        return self.snapshot

    def save_snapshot(self, snapshot):
        if self.fail_with is not None:
            raise self.fail_with
        self.saved.append(snapshot)
        self.snapshot = snapshot


@pytest.fixture
def clock():
    """Fake clock starting at a fixed timestamp."""
    return FakeClock()


@pytest.fixture
def store():
    """Empty in-memory snapshot store."""
    return MemoryStore()


@pytest.fixture
def store_factory():
    """Build a MemoryStore, optionally pre-loaded or failing on save."""
    return MemoryStore
