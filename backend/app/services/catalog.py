"""
Workout Catalog
===============
Static, read-only list of guided workouts shown on the home screen.

This module is the single source of truth for workout definitions. It is
data, not logic: nothing here is persisted and nothing mutates it. Video
URLs are handed to the app's embedded player as-is.
"""

from __future__ import annotations

from typing import Optional

from app.models.workout import Exercise, OnboardingSlide, Workout

WORKOUTS: tuple[Workout, ...] = (
    Workout(
        id=1,
        title="Workout A: Full Body",
        display_duration="15 min",
        type="Full Body",
        level="Beginner",
        exercises=(
            Exercise(
                id=1,
                name="Squat",
                duration_seconds=45,
                instructions="Keep your back straight and lower to 90 degrees. Feet shoulder-width apart.",
                media_ref="https://www.youtube.com/watch?v=aclHkVaku9U",
            ),
            Exercise(
                id=2,
                name="Push-up",
                duration_seconds=30,
                instructions="Keep your body aligned and lower with control. Elbows at 45 degrees.",
                media_ref="https://www.youtube.com/watch?v=IODxDxX7oi4",
            ),
            Exercise(
                id=3,
                name="Plank",
                duration_seconds=30,
                instructions="Brace your core and hold your body straight as a board.",
                media_ref="https://www.youtube.com/watch?v=ASdvN_XEl_c",
            ),
        ),
    ),
    Workout(
        id=2,
        title="Workout B: HIIT",
        display_duration="20 min",
        type="HIIT",
        level="Intermediate",
        premium_only=True,
        exercises=(
            Exercise(
                id=1,
                name="Burpees",
                duration_seconds=40,
                instructions="Full explosive movement: squat, plank, push-up, jump.",
                media_ref="https://www.youtube.com/watch?v=JZQA08SlJnM",
                premium_only=True,
            ),
            Exercise(
                id=2,
                name="Mountain Climbers",
                duration_seconds=40,
                instructions="Alternate legs quickly while keeping the core engaged.",
                media_ref="https://www.youtube.com/watch?v=nmwgirgXLYM",
                premium_only=True,
            ),
            Exercise(
                id=3,
                name="Jump Squats",
                duration_seconds=40,
                instructions="Squat with an explosive jump. Land softly.",
                media_ref="https://www.youtube.com/watch?v=A-cFYWvaHr0",
                premium_only=True,
            ),
        ),
    ),
    Workout(
        id=3,
        title="Workout C: Stretching",
        display_duration="10 min",
        type="Stretching",
        level="Beginner",
        exercises=(
            Exercise(
                id=1,
                name="Leg Stretch",
                duration_seconds=60,
                instructions="Stretch gently without forcing. Breathe deeply.",
                media_ref="https://www.youtube.com/watch?v=g_tea8ZNk5A",
            ),
            Exercise(
                id=2,
                name="Arm Stretch",
                duration_seconds=60,
                instructions="Hold the position for 30s on each side. No pain.",
                media_ref="https://www.youtube.com/watch?v=SSbX4tm4rJE",
            ),
            Exercise(
                id=3,
                name="Back Stretch",
                duration_seconds=60,
                instructions="Breathe deeply through the stretch. Relax your shoulders.",
                media_ref="https://www.youtube.com/watch?v=4BOTvaRaDjI",
            ),
        ),
    ),
)

_BY_ID: dict[int, Workout] = {w.id: w for w in WORKOUTS}

if len(_BY_ID) != len(WORKOUTS):
    raise RuntimeError("Workout ids in the catalog must be unique")

ONBOARDING_SLIDES: tuple[OnboardingSlide, ...] = (
    OnboardingSlide(
        title="Train at Home",
        text="Work out at your own pace, no gym required.",
        icon="dumbbell",
    ),
    OnboardingSlide(
        title="Personalised Workouts",
        text="Guided videos and daily plans adapted to your level.",
        icon="target",
    ),
    OnboardingSlide(
        title="Track Your Progress",
        text="Hit goals, unlock badges and follow your progress.",
        icon="trophy",
    ),
)


def list_workouts(level: Optional[str] = None) -> list[Workout]:
    """All workouts in catalog order, optionally only those at *level*."""
    if level is None:
        return list(WORKOUTS)
    return [w for w in WORKOUTS if w.level == level]


def get_workout(workout_id: int) -> Optional[Workout]:
    return _BY_ID.get(workout_id)
