"""
Workout Sessions Router
=======================
POST   /api/v1/sessions                  - Start a workout.
GET    /api/v1/sessions/current          - Current session state and countdown.
POST   /api/v1/sessions/current/advance  - Skip to the next exercise.
POST   /api/v1/sessions/current/reenter  - Retry a gated session after upgrading.
DELETE /api/v1/sessions/current          - Leave the workout.

A user has at most one session. Starting a new workout abandons the one
in progress. Premium gating is reported as ``state="gated"``, never as an
error. When the last exercise is passed the completion is saved and the
refreshed stats come back in ``progress``. A completed session is
reported once, by the advance that finished it or by the next
GET /current if the timer finished it; after that GET /current returns 404.

Calling advance on a gated session, or any operation on a finished one,
is a client bug and returns 409.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Response, status

from app.auth import get_authenticated_user
from app.models.session import SessionView, StartSessionRequest
from app.services.catalog import get_workout
from app.services.progress import build_progress
from app.services.session_registry import ActiveSession, NoActiveSession, get_session_registry
from app.services.workout_session import InvalidSessionOperation, SessionState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _view(entry: ActiveSession) -> SessionView:
    session = entry.session
    show_exercise = (
        session.state in (SessionState.running, SessionState.gated)
        and session.gated_scope != "workout"
    )
    progress = None
    if entry.progress is not None:
        progress = build_progress(entry.progress.profile, entry.progress.history)

    return SessionView(
        workout_id=session.workout.id,
        workout_title=session.workout.title,
        state=session.state.value,
        current_index=session.current_index,
        exercise_count=len(session.workout.exercises),
        remaining_seconds=session.remaining_seconds,
        gated_scope=session.gated_scope,
        exercise=session.current_exercise if show_exercise else None,
        progress_pct=session.progress_pct,
        progress=progress,
    )


def _no_session() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "No workout in progress", "code": "no_active_session"},
    )


def _invalid_operation(exc: InvalidSessionOperation) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"message": str(exc), "code": "invalid_session_operation"},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="Start a workout",
    description=(
        "Select a workout using the caller's current premium status. The "
        "session is either running its first exercise or gated behind premium."
    ),
    responses={
        201: {"description": "Session started (running or gated)"},
        401: {"description": "Authentication required"},
        404: {"description": "Unknown workout"},
    },
)
async def start_session(
    body: StartSessionRequest,
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> SessionView:
    profile = get_authenticated_user(authorization)

    workout = get_workout(body.workout_id)
    if workout is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"Workout {body.workout_id} not found", "code": "workout_not_found"},
        )

    entry = get_session_registry().start(profile, workout)
    return _view(entry)


@router.get(
    "/current",
    response_model=SessionView,
    summary="Get the current session",
    responses={404: {"description": "No workout in progress"}},
)
async def get_current_session(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> SessionView:
    profile = get_authenticated_user(authorization)
    try:
        entry = get_session_registry().get(profile.id)
    except NoActiveSession as exc:
        raise _no_session() from exc
    await entry.settle()
    return _view(entry)


@router.post(
    "/current/advance",
    response_model=SessionView,
    summary="Skip to the next exercise",
    responses={
        404: {"description": "No workout in progress"},
        409: {"description": "Session is gated or already finished"},
    },
)
async def advance_session(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> SessionView:
    profile = get_authenticated_user(authorization)
    try:
        entry = get_session_registry().advance(profile.id)
    except NoActiveSession as exc:
        raise _no_session() from exc
    except InvalidSessionOperation as exc:
        raise _invalid_operation(exc) from exc
    await entry.settle()
    return _view(entry)


@router.post(
    "/current/reenter",
    response_model=SessionView,
    summary="Retry a gated session",
    description=(
        "Re-reads the caller's premium status and re-evaluates the gated "
        "exercise from its full duration."
    ),
    responses={
        404: {"description": "No workout in progress"},
        409: {"description": "Session is not gated"},
    },
)
async def reenter_session(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> SessionView:
    profile = get_authenticated_user(authorization)
    try:
        entry = get_session_registry().reenter(profile.id, profile)
    except NoActiveSession as exc:
        raise _no_session() from exc
    except InvalidSessionOperation as exc:
        raise _invalid_operation(exc) from exc
    return _view(entry)


@router.delete(
    "/current",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave the workout",
    description="Abandons the session. Nothing is saved. Safe to repeat.",
)
async def abandon_session(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> Response:
    profile = get_authenticated_user(authorization)
    get_session_registry().abandon(profile.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
