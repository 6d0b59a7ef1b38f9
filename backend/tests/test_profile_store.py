"""
Tests for the Profile & History store
=====================================
Covers:
- SupabaseProfileStore.get_profile: row -> UserProfile, missing row -> None
  (both empty data and a None response from maybe_single)
- list_history: newest-first ordering and limit passed to the query
- insert_history: row shape, returned record, empty result -> StoreError
- update_profile: fields sent, empty result -> StoreError
- Client exceptions wrapped as StoreError
- Rows that fail validation (null name, unknown level, null duration)
  raised as StoreError
- DisabledProfileStore: every call raises ConfigurationError
- get_profile_store: picks the variant from settings

Run: pytest tests/test_profile_store.py -v
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.config import ConfigurationError, Settings
from app.services.profile_store import (
    DisabledProfileStore,
    StoreError,
    SupabaseProfileStore,
    get_profile_store,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

_USER_ID = str(uuid.uuid4())

_PROFILE_ROW = {
    "id": _USER_ID,
    "email": "ana@example.com",
    "name": "Ana",
    "level": "Beginner",
    "is_premium": False,
    "streak": 3,
    "total_workouts": 12,
    "total_time": 180,
    "created_at": "2026-01-10T09:00:00+00:00",
}

_HISTORY_ROW = {
    "id": str(uuid.uuid4()),
    "user_id": _USER_ID,
    "workout_title": "Workout C: Stretching",
    "duration": 10,
    "completed_at": "2026-10-18T07:30:00+00:00",
}


def _result(data) -> MagicMock:
    result = MagicMock()
    result.data = data
    return result


# ---------------------------------------------------------------------------
# SupabaseProfileStore
# ---------------------------------------------------------------------------

class TestGetProfile:

    def test_returns_profile(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_PROFILE_ROW)

        profile = SupabaseProfileStore(db).get_profile(_USER_ID)

        db.table.assert_called_with("user_profiles")
        assert profile.id == _USER_ID
        assert profile.total_workouts == 12
        assert profile.is_premium is False

    def test_missing_row_returns_none(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(None)

        assert SupabaseProfileStore(db).get_profile(_USER_ID) is None

    def test_none_response_returns_none(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = None

        assert SupabaseProfileStore(db).get_profile(_USER_ID) is None

    def test_client_error_wrapped(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.side_effect = RuntimeError("JWT expired")

        with pytest.raises(StoreError, match="JWT expired"):
            SupabaseProfileStore(db).get_profile(_USER_ID)

    def test_malformed_row_raises_store_error(self):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(
            {"id": _USER_ID, "name": None, "level": "Iniciante"}
        )

        with pytest.raises(StoreError, match="Malformed profile"):
            SupabaseProfileStore(db).get_profile(_USER_ID)


class TestListHistory:

    def test_newest_first_with_limit(self):
        db = MagicMock()
        chain = db.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = _result([_HISTORY_ROW])

        records = SupabaseProfileStore(db).list_history(_USER_ID, 10)

        db.table.assert_called_with("workout_history")
        chain.order.assert_called_once_with("completed_at", desc=True)
        chain.order.return_value.limit.assert_called_once_with(10)
        assert len(records) == 1
        assert records[0].workout_title == "Workout C: Stretching"

    def test_empty_history(self):
        db = MagicMock()
        chain = db.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = _result([])

        assert SupabaseProfileStore(db).list_history(_USER_ID, 5) == []

    def test_malformed_row_raises_store_error(self):
        db = MagicMock()
        chain = db.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = _result(
            [_HISTORY_ROW, {**_HISTORY_ROW, "duration": None}]
        )

        with pytest.raises(StoreError, match="Malformed history row"):
            SupabaseProfileStore(db).list_history(_USER_ID, 10)


class TestInsertHistory:

    def test_inserts_row(self):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.return_value = _result([_HISTORY_ROW])
        completed_at = datetime(2026, 10, 18, 7, 30, tzinfo=timezone.utc)

        record = SupabaseProfileStore(db).insert_history(
            _USER_ID, "Workout C: Stretching", 10, completed_at
        )

        row = db.table.return_value.insert.call_args[0][0]
        assert row == {
            "user_id": _USER_ID,
            "workout_title": "Workout C: Stretching",
            "duration": 10,
            "completed_at": completed_at.isoformat(),
        }
        assert record.id == _HISTORY_ROW["id"]

    def test_empty_result_raises(self):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.return_value = _result([])

        with pytest.raises(StoreError):
            SupabaseProfileStore(db).insert_history(
                _USER_ID, "x", 10, datetime.now(timezone.utc)
            )


class TestUpdateProfile:

    def test_sends_fields(self):
        db = MagicMock()
        updated = {**_PROFILE_ROW, "streak": 4, "total_workouts": 13, "total_time": 190}
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([updated])
        fields = {"streak": 4, "total_workouts": 13, "total_time": 190}

        profile = SupabaseProfileStore(db).update_profile(_USER_ID, fields)

        db.table.return_value.update.assert_called_once_with(fields)
        db.table.return_value.update.return_value.eq.assert_called_once_with("id", _USER_ID)
        assert profile.total_workouts == 13

    def test_no_matching_row_raises(self):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])

        with pytest.raises(StoreError):
            SupabaseProfileStore(db).update_profile(_USER_ID, {"streak": 1})


# ---------------------------------------------------------------------------
# DisabledProfileStore
# ---------------------------------------------------------------------------

class TestDisabledStore:

    @pytest.mark.parametrize(
        "method, args",
        [
            ("get_profile", (_USER_ID,)),
            ("list_history", (_USER_ID, 10)),
            ("insert_history", (_USER_ID, "x", 10, datetime.now(timezone.utc))),
            ("update_profile", (_USER_ID, {"streak": 1})),
        ],
    )
    def test_every_call_raises(self, method, args):
        store = DisabledProfileStore("Supabase is not configured.")
        with pytest.raises(ConfigurationError, match="not configured"):
            getattr(store, method)(*args)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class TestGetProfileStore:

    def setup_method(self):
        get_profile_store.cache_clear()

    def teardown_method(self):
        get_profile_store.cache_clear()

    def test_unconfigured_returns_disabled(self):
        with patch("app.services.profile_store.get_settings", return_value=Settings(supabase_url="", supabase_key="")):
            assert isinstance(get_profile_store(), DisabledProfileStore)

    def test_configured_returns_supabase_store(self):
        settings = Settings(supabase_url="https://abc.supabase.co", supabase_key="service-key")
        with (
            patch("app.services.profile_store.get_settings", return_value=settings),
            patch("app.services.profile_store.get_supabase_client", return_value=MagicMock()),
        ):
            assert isinstance(get_profile_store(), SupabaseProfileStore)

    def test_selected_once(self):
        with patch("app.services.profile_store.get_settings", return_value=Settings(supabase_url="", supabase_key="")) as mock_settings:
            first = get_profile_store()
            second = get_profile_store()

        assert first is second
        assert mock_settings.call_count == 1
