"""
Session Timer
=============
One-second countdown for the exercise currently playing.

The timer never sleeps in a loop: each tick is a single ``call_later``
on the running asyncio loop, so the state machine stays on the event
loop thread and no two ticks can interleave. A generation counter marks
every scheduled tick; ``cancel()`` and ``start()`` bump it, which turns
any tick already in flight into a no-op.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0

# call_later(delay, callback) -> handle with .cancel()
Scheduler = Callable[[float, Callable[[], None]], Any]


class SessionTimer:
    """Counts down from a duration, publishing each second to *on_tick*.

    *on_elapsed* fires exactly once when the countdown reaches zero, after
    which the timer is idle until the next ``start()``.
    """

    def __init__(
        self,
        on_tick: Callable[[int], None],
        on_elapsed: Callable[[], None],
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._on_tick = on_tick
        self._on_elapsed = on_elapsed
        self._scheduler = scheduler
        self._handle: Any = None
        self._generation = 0
        self.remaining = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, duration_seconds: int) -> None:
        """Reset to *duration_seconds* and begin counting down.

        Any countdown still pending is cancelled first.
        """
        if duration_seconds <= 0:
            raise ValueError(f"duration_seconds must be positive, got {duration_seconds}")
        self.cancel()
        self.remaining = duration_seconds
        self._schedule()

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        generation = self._generation
        call_later = self._scheduler or asyncio.get_running_loop().call_later
        self._handle = call_later(TICK_SECONDS, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale timer tick (generation %d)", generation)
            return

        self._handle = None
        self.remaining = max(self.remaining - 1, 0)
        self._on_tick(self.remaining)

        # on_tick may have restarted or cancelled us
        if generation != self._generation:
            return

        if self.remaining > 0:
            self._schedule()
            return

        self._generation += 1
        self._on_elapsed()
