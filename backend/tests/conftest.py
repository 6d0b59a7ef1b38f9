"""
Shared fixtures.

ManualScheduler stands in for ``loop.call_later`` so timer-driven tests
advance the clock explicitly instead of sleeping.
"""

from __future__ import annotations

from typing import Callable

import pytest


class ManualHandle:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    def __init__(self) -> None:
        self._scheduled: list[ManualHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(callback)
        self._scheduled.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._scheduled if not h.cancelled]

    @property
    def last(self) -> ManualHandle:
        return self._scheduled[-1]

    def advance(self, seconds: int = 1) -> None:
        """Fire every live callback once per simulated second."""
        for _ in range(seconds):
            due = self.pending
            self._scheduled = []
            for handle in due:
                handle.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
