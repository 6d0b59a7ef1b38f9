"""
Profile & Progress Router
=========================
GET /api/v1/profile   - The caller's profile (name, level, premium flag, stats).
GET /api/v1/progress  - Stats, recent history and this week's chart.

History is read newest first and capped at ``history_limit`` rows. The
weekly chart is computed from those rows.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header

from app.auth import get_authenticated_user, service_unavailable, store_failure
from app.config import ConfigurationError, get_settings
from app.models.profile import ProgressResponse, UserProfile
from app.services.profile_store import StoreError, get_profile_store
from app.services.progress import build_progress

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["profile"])


@router.get(
    "/profile",
    response_model=UserProfile,
    summary="Get the caller's profile",
    responses={401: {"description": "Authentication required"}},
)
async def get_profile(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> UserProfile:
    return get_authenticated_user(authorization)


@router.get(
    "/progress",
    response_model=ProgressResponse,
    summary="Get progress stats and history",
    responses={
        401: {"description": "Authentication required"},
        502: {"description": "Progress store unreachable"},
    },
)
async def get_progress(
    authorization: str = Header(..., description="Bearer token from Supabase Auth"),
) -> ProgressResponse:
    profile = get_authenticated_user(authorization)

    try:
        history = get_profile_store().list_history(profile.id, get_settings().history_limit)
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc
    except StoreError as exc:
        logger.warning("History lookup failed for user %s: %s", profile.id, exc)
        raise store_failure(exc) from exc

    return build_progress(profile, history)
