"""
Premium Gating Policy
=====================
Decides whether premium-only content is visible to a user.

Checked at two boundaries: when a workout is selected (workout flag)
and each time a session enters an exercise (workout flag AND exercise
flag). Being gated is a state, not an error.
"""

from __future__ import annotations

from typing import Union

from app.models.workout import Exercise, Workout


def is_accessible(target: Union[Workout, Exercise], entitlement: bool) -> bool:
    return entitlement or not target.premium_only


def is_exercise_accessible(workout: Workout, exercise: Exercise, entitlement: bool) -> bool:
    """Either flag being premium-only blocks a user without entitlement."""
    return is_accessible(workout, entitlement) and is_accessible(exercise, entitlement)
