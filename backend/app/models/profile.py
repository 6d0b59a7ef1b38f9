"""
Profile & History Schemas
=========================
Row shapes of the Supabase ``user_profiles`` and ``workout_history``
tables, plus the progress view returned to the app.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.workout import Level


class UserProfile(BaseModel):
    """One row of user_profiles. Counters are only bumped on completion."""

    id: str
    email: Optional[str] = None
    name: str = ""
    level: Level = "Beginner"
    is_premium: bool = False
    streak: int = Field(default=0, ge=0)
    total_workouts: int = Field(default=0, ge=0)
    total_time: int = Field(default=0, ge=0, description="Minutes trained, all time.")
    stripe_customer_id: Optional[str] = None
    created_at: Optional[datetime] = None


class WorkoutHistoryRecord(BaseModel):
    """One row of workout_history. Append-only."""

    id: str
    user_id: str
    workout_title: str
    duration: int = Field(..., ge=0, description="Minutes.")
    completed_at: datetime


class WeeklyChartPoint(BaseModel):
    day: str
    date: date
    minutes: int


class ProgressSnapshot(BaseModel):
    """Profile and recent history as read back from the store."""

    profile: UserProfile
    history: list[WorkoutHistoryRecord]


class ProgressResponse(BaseModel):
    """Payload for the progress screen."""

    streak: int
    total_workouts: int
    total_minutes: int
    total_hours: int
    weekly: list[WeeklyChartPoint]
    history: list[WorkoutHistoryRecord]
