"""
Workout Schemas
===============
Catalog value types (Exercise, Workout) and the API views built on top
of them. Catalog types are frozen: they are defined once at import time
and shared by every session.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

Level = Literal["Beginner", "Intermediate", "Advanced"]

VALID_LEVELS: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced")

_LEADING_INT = re.compile(r"^\s*(\d+)")


def parse_duration_minutes(display_duration: str) -> int:
    """Read the leading integer of a display duration, e.g. '15 min' -> 15."""
    match = _LEADING_INT.match(display_duration)
    if not match:
        raise ValueError(f"display duration has no leading minutes: {display_duration!r}")
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Catalog types
# ---------------------------------------------------------------------------

class Exercise(BaseModel):
    """One timed, video-guided exercise inside a workout."""

    id: int
    name: str
    duration_seconds: int = Field(..., gt=0)
    instructions: str
    media_ref: str = Field(..., description="URL handed to the embedded video player.")
    premium_only: bool = False

    model_config = {"frozen": True}


class Workout(BaseModel):
    """An ordered sequence of exercises. Order is playback order."""

    id: int
    title: str
    display_duration: str
    type: str
    level: Level
    exercises: tuple[Exercise, ...] = Field(..., min_length=1)
    premium_only: bool = False

    model_config = {"frozen": True}

    @field_validator("display_duration")
    @classmethod
    def _has_minutes(cls, value: str) -> str:
        parse_duration_minutes(value)
        return value

    @model_validator(mode="after")
    def _unique_exercise_ids(self) -> "Workout":
        ids = [e.id for e in self.exercises]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate exercise id in workout {self.id}")
        return self

    @property
    def duration_minutes(self) -> int:
        return parse_duration_minutes(self.display_duration)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class WorkoutSummary(BaseModel):
    """A catalog card on the home screen."""

    id: int
    title: str
    display_duration: str
    type: str
    level: Level
    exercise_count: int
    premium_only: bool
    locked: bool = Field(
        default=False,
        description="True when the caller is signed in and lacks premium for this workout.",
    )


class WorkoutDetailResponse(BaseModel):
    """Full workout with its exercises, in playback order."""

    id: int
    title: str
    display_duration: str
    type: str
    level: Level
    premium_only: bool
    exercises: list[Exercise]


class OnboardingSlide(BaseModel):
    title: str
    text: str
    icon: str

