"""Fixtures for cache store tests."""

from __future__ import annotations

import pytest


class Clock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)

    def tick(self) -> int:
        """Advance by one millisecond and return the new time."""
        self.now += 1
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()
