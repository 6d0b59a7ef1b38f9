"""
Workouts Router
===============
GET /api/v1/workouts       - The workout catalog, optionally filtered by level.
GET /api/v1/workouts/{id}  - One workout with its exercises in playback order.

The catalog is public. When a bearer token is sent, each card is marked
``locked`` if it is premium-only and the caller has no premium access, so
the home screen can show "Unlock Premium" instead of "Start Workout".
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query, status

from app.auth import get_authenticated_user
from app.models.workout import Level, Workout, WorkoutDetailResponse, WorkoutSummary
from app.services.catalog import get_workout, list_workouts
from app.services.premium import is_accessible

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/workouts", tags=["workouts"])


def _summary(workout: Workout, entitlement: Optional[bool]) -> WorkoutSummary:
    locked = entitlement is not None and not is_accessible(workout, entitlement)
    return WorkoutSummary(
        id=workout.id,
        title=workout.title,
        display_duration=workout.display_duration,
        type=workout.type,
        level=workout.level,
        exercise_count=len(workout.exercises),
        premium_only=workout.premium_only,
        locked=locked,
    )


@router.get(
    "",
    response_model=list[WorkoutSummary],
    summary="List workouts",
    responses={
        200: {"description": "Catalog returned"},
        401: {"description": "A bearer token was sent but is invalid"},
    },
)
async def get_workouts(
    level: Optional[Level] = Query(default=None, description="Only workouts at this level."),
    authorization: Optional[str] = Header(default=None, description="Optional bearer token"),
) -> list[WorkoutSummary]:
    entitlement: Optional[bool] = None
    if authorization is not None:
        entitlement = get_authenticated_user(authorization).is_premium

    return [_summary(w, entitlement) for w in list_workouts(level)]


@router.get(
    "/{workout_id}",
    response_model=WorkoutDetailResponse,
    summary="Get a workout",
    responses={404: {"description": "No workout with this id"}},
)
async def get_workout_detail(workout_id: int) -> WorkoutDetailResponse:
    workout = get_workout(workout_id)
    if workout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"Workout {workout_id} not found", "code": "workout_not_found"},
        )
    return WorkoutDetailResponse(
        id=workout.id,
        title=workout.title,
        display_duration=workout.display_duration,
        type=workout.type,
        level=workout.level,
        premium_only=workout.premium_only,
        exercises=list(workout.exercises),
    )
