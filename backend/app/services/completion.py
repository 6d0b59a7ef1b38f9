"""
Completion Handler
==================
Records a finished workout. Runs once per session that reaches
``completed``:

    1. Append a workout_history row (title, minutes, completed_at=now).
    2. Bump the profile counters: total_workouts +1, total_time +minutes,
       streak +1.
    3. Read profile and history back from the store.

This is best-effort, not a transaction. If a write fails, the error is
logged, the remaining writes are skipped and nothing is retried. The read
in step 3 still runs so the caller shows what the store really holds.
The handler never raises: a failed save must not strand the user on the
workout screen.

Streak is incremented on every completion without checking whether the
previous workout was on the previous calendar day.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from app.config import get_settings
from app.models.profile import ProgressSnapshot, UserProfile
from app.services.profile_store import ProfileStore, get_profile_store
from app.services.workout_session import WorkoutSession

logger = logging.getLogger(__name__)


class CompletionHandler:
    """Persists a completed session and returns the refreshed progress."""

    def __init__(self, store: ProfileStore, history_limit: int = 10) -> None:
        self._store = store
        self._history_limit = history_limit

    def complete(self, session: WorkoutSession, profile: UserProfile) -> Optional[ProgressSnapshot]:
        workout = session.workout
        minutes = workout.duration_minutes
        user_id = profile.id

        try:
            # Step 1: history
            self._store.insert_history(
                user_id=user_id,
                workout_title=workout.title,
                duration_minutes=minutes,
                completed_at=datetime.now(timezone.utc),
            )

            # Step 2: counters, from the profile snapshot held for this session
            self._store.update_profile(
                user_id,
                {
                    "total_workouts": profile.total_workouts + 1,
                    "total_time": profile.total_time + minutes,
                    "streak": profile.streak + 1,
                },
            )
            logger.info(
                "Saved completion of '%s' (%d min) for user %s",
                workout.title, minutes, user_id,
            )
        except Exception:
            logger.exception(
                "Failed to save completion of '%s' for user %s (progress may not be saved)",
                workout.title, user_id,
            )

        # Step 3: read-after-write
        try:
            refreshed = self._store.get_profile(user_id)
            history = self._store.list_history(user_id, self._history_limit)
        except Exception:
            logger.exception("Failed to reload progress for user %s", user_id)
            return None

        if refreshed is None:
            logger.warning("Profile %s vanished after completion", user_id)
            return None

        return ProgressSnapshot(profile=refreshed, history=history)


def get_completion_handler() -> CompletionHandler:
    return CompletionHandler(get_profile_store(), history_limit=get_settings().history_limit)
