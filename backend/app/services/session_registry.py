"""
Session Registry
================
Holds the one active workout session per user between HTTP requests.

Each entry pairs the WorkoutSession with the profile snapshot read when
the workout was selected. The completion handler uses that snapshot to
bump counters. The session itself is ephemeral and never written anywhere.

A completed entry stays registered until it has been read once, so the
client learns the workout finished even when the timer ended it between
requests. Abandoned entries are dropped immediately.

State changes run on the event loop thread (request handlers and timer
callbacks alike), so no locking is needed. The completion save is the
exception: supabase-py is synchronous, so when a loop is running the save
goes to the default executor and the entry holds the pending future.
Callers `await entry.settle()` before reading `progress`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from app.models.profile import ProgressSnapshot, UserProfile
from app.models.workout import Workout
from app.services.completion import CompletionHandler, get_completion_handler
from app.services.timer import Scheduler
from app.services.workout_session import SessionState, WorkoutSession

logger = logging.getLogger(__name__)


class NoActiveSession(LookupError):
    """The user has no workout in progress."""


class ActiveSession:
    """A running (or gated) session plus what it needs to finish."""

    def __init__(self, profile: UserProfile) -> None:
        self.profile = profile
        self.session: Optional[WorkoutSession] = None
        self.progress: Optional[ProgressSnapshot] = None
        self.pending_save: Optional[asyncio.Future] = None

    async def settle(self) -> None:
        """Wait for a completion save running in the executor, if any."""
        if self.pending_save is not None:
            self.progress = await self.pending_save
            self.pending_save = None


class SessionRegistry:
    def __init__(
        self,
        completion_factory: Callable[[], CompletionHandler] = get_completion_handler,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._completion_factory = completion_factory
        self._scheduler = scheduler
        self._entries: dict[str, ActiveSession] = {}

    def start(self, profile: UserProfile, workout: Workout) -> ActiveSession:
        """Select *workout* for *profile*, abandoning any session in progress."""
        self.abandon(profile.id)

        entry = ActiveSession(profile)

        def on_complete(session: WorkoutSession) -> None:
            handler = self._completion_factory()
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                entry.progress = handler.complete(session, entry.profile)
                return
            entry.pending_save = loop.run_in_executor(
                None, handler.complete, session, entry.profile
            )

        entry.session = WorkoutSession(
            workout,
            entitlement=profile.is_premium,
            on_complete=on_complete,
            scheduler=self._scheduler,
        )
        self._entries[profile.id] = entry
        entry.session.begin()
        logger.info(
            "User %s selected workout %d (%s)",
            profile.id, workout.id, entry.session.state.value,
        )
        return entry

    def get(self, user_id: str) -> ActiveSession:
        """The user's session. A completed one is handed out once, then dropped."""
        entry = self._entries.get(user_id)
        if entry is None:
            raise NoActiveSession(user_id)
        self._drop_if_completed(user_id, entry)
        return entry

    def advance(self, user_id: str) -> ActiveSession:
        entry = self.get(user_id)
        entry.session.advance()
        self._drop_if_completed(user_id, entry)
        return entry

    def reenter(self, user_id: str, profile: UserProfile) -> ActiveSession:
        entry = self.get(user_id)
        entry.profile = profile
        entry.session.reenter(profile.is_premium)
        return entry

    def abandon(self, user_id: str) -> None:
        """Drop the user's session, if any. Safe to call repeatedly."""
        entry = self._entries.pop(user_id, None)
        if entry is not None and entry.session is not None and not entry.session.finished:
            entry.session.abandon()

    def _drop_if_completed(self, user_id: str, entry: ActiveSession) -> None:
        if entry.session.state is SessionState.completed and self._entries.get(user_id) is entry:
            del self._entries[user_id]


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = SessionRegistry()
    return _default_registry
