"""
Profile & History Store
=======================
Reads and writes user statistics and workout history in Supabase.

Two implementations of the same interface:
- SupabaseProfileStore: real table queries through supabase-py.
- DisabledProfileStore: used when Supabase credentials are missing.
  Every call raises ConfigurationError so the app can show a
  "not configured" state instead of crashing on a half-built client.

get_profile_store() picks one when first called and keeps it for the
life of the process.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from app.config import ConfigurationError, get_settings
from app.db.supabase import get_supabase_client
from app.models.profile import UserProfile, WorkoutHistoryRecord

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"
HISTORY_TABLE = "workout_history"

_Row = TypeVar("_Row", bound=BaseModel)


class StoreError(Exception):
    """A Supabase read or write failed (network, auth, validation)."""


class ProfileStore(Protocol):
    def get_profile(self, user_id: str) -> Optional[UserProfile]: ...

    def list_history(self, user_id: str, limit: int) -> list[WorkoutHistoryRecord]: ...

    def insert_history(
        self,
        user_id: str,
        workout_title: str,
        duration_minutes: int,
        completed_at: datetime,
    ) -> WorkoutHistoryRecord: ...

    def update_profile(self, user_id: str, fields: dict[str, Any]) -> UserProfile: ...


# ---------------------------------------------------------------------------
# Supabase-backed store
# ---------------------------------------------------------------------------

class SupabaseProfileStore:
    """user_profiles + workout_history through the Supabase REST API."""

    def __init__(self, client: Any) -> None:
        self._db = client

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        result = self._execute(
            self._db.table(PROFILES_TABLE)
            .select("*")
            .eq("id", user_id)
            .maybe_single(),
            f"load profile {user_id}",
        )
        # maybe_single() yields no response at all when the row is missing
        if result is None or not result.data:
            return None
        return self._parse(UserProfile, result.data, f"profile {user_id}")

    def list_history(self, user_id: str, limit: int) -> list[WorkoutHistoryRecord]:
        """Most recent completions first."""
        result = self._execute(
            self._db.table(HISTORY_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("completed_at", desc=True)
            .limit(limit),
            f"list history for {user_id}",
        )
        return [
            self._parse(WorkoutHistoryRecord, row, f"history row for {user_id}")
            for row in (result.data or [])
        ]

    def insert_history(
        self,
        user_id: str,
        workout_title: str,
        duration_minutes: int,
        completed_at: datetime,
    ) -> WorkoutHistoryRecord:
        row = {
            "user_id": user_id,
            "workout_title": workout_title,
            "duration": duration_minutes,
            "completed_at": completed_at.isoformat(),
        }
        result = self._execute(
            self._db.table(HISTORY_TABLE).insert(row),
            f"insert history for {user_id}",
        )
        if not result.data:
            raise StoreError(f"History insert for user {user_id} returned no row")
        return self._parse(WorkoutHistoryRecord, result.data[0], f"history row for {user_id}")

    def update_profile(self, user_id: str, fields: dict[str, Any]) -> UserProfile:
        result = self._execute(
            self._db.table(PROFILES_TABLE).update(fields).eq("id", user_id),
            f"update profile {user_id}",
        )
        if not result.data:
            raise StoreError(f"Profile update for user {user_id} matched no row")
        return self._parse(UserProfile, result.data[0], f"profile {user_id}")

    @staticmethod
    def _execute(query: Any, action: str) -> Any:
        try:
            return query.execute()
        except Exception as exc:
            raise StoreError(f"Failed to {action}: {exc}") from exc

    @staticmethod
    def _parse(model: type[_Row], row: dict[str, Any], what: str) -> _Row:
        try:
            return model(**row)
        except ValidationError as exc:
            raise StoreError(f"Malformed {what}: {exc}") from exc


# ---------------------------------------------------------------------------
# Disabled store
# ---------------------------------------------------------------------------

class DisabledProfileStore:
    """Stand-in when Supabase is not configured. Fails every call, loudly."""

    def __init__(self, reason: str) -> None:
        self._reason = reason

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        raise ConfigurationError(self._reason)

    def list_history(self, user_id: str, limit: int) -> list[WorkoutHistoryRecord]:
        raise ConfigurationError(self._reason)

    def insert_history(
        self,
        user_id: str,
        workout_title: str,
        duration_minutes: int,
        completed_at: datetime,
    ) -> WorkoutHistoryRecord:
        raise ConfigurationError(self._reason)

    def update_profile(self, user_id: str, fields: dict[str, Any]) -> UserProfile:
        raise ConfigurationError(self._reason)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

@lru_cache
def get_profile_store() -> ProfileStore:
    if not get_settings().supabase_configured:
        logger.warning("Supabase not configured: progress tracking is disabled")
        return DisabledProfileStore(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY "
            "to enable progress tracking."
        )
    return SupabaseProfileStore(get_supabase_client())
