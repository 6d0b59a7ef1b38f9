"""
Session Schemas
===============
Request and response shapes for the workout-session endpoints.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.models.profile import ProgressResponse
from app.models.workout import Exercise

SessionStateName = Literal["not_started", "running", "gated", "completed", "abandoned"]


class StartSessionRequest(BaseModel):
    workout_id: int


class SessionView(BaseModel):
    """Snapshot of the caller's workout session."""

    workout_id: int
    workout_title: str
    state: SessionStateName
    current_index: int
    exercise_count: int
    remaining_seconds: int = Field(..., ge=0)
    gated_scope: Optional[Literal["workout", "exercise"]] = None
    exercise: Optional[Exercise] = Field(
        default=None,
        description="Current exercise; omitted while the whole workout is gated or once completed.",
    )
    progress_pct: float = Field(..., ge=0.0, le=100.0)
    progress: Optional[ProgressResponse] = Field(
        default=None,
        description="Refreshed stats, present once the session completes and they could be reloaded.",
    )
