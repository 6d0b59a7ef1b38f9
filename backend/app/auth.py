"""
Request Authentication
======================
Resolves the ``Authorization: Bearer <token>`` header to the caller's
UserProfile. Shared by every router that needs a signed-in user.

The token is verified with Supabase Auth; the profile row (with the
``is_premium`` flag used for gating) comes from the profile store.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException, status

from app.config import ConfigurationError
from app.db.supabase import get_supabase_client
from app.models.profile import UserProfile
from app.services.profile_store import StoreError, get_profile_store

logger = logging.getLogger(__name__)


def service_unavailable(exc: ConfigurationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"message": str(exc), "code": "service_not_configured"},
    )


def store_failure(exc: StoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"message": "Could not reach the progress store", "code": "store_error"},
    )


def get_authenticated_user(authorization: Optional[str]) -> UserProfile:
    """Verify the JWT and return the caller's profile.

    Raises HTTPException 401 if the token is invalid or missing, 404 if
    the profile row does not exist, 503 if Supabase is not configured.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Missing or invalid authorization header", "code": "auth_required"},
        )

    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Empty bearer token", "code": "auth_required"},
        )

    try:
        db = get_supabase_client()
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc

    try:
        auth_response = db.auth.get_user(token)
    except Exception as exc:
        logger.warning("Auth token verification failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid or expired token", "code": "auth_invalid"},
        ) from exc

    if not auth_response or not auth_response.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "User not found for token", "code": "auth_invalid"},
        )

    user_id = auth_response.user.id

    try:
        profile = get_profile_store().get_profile(user_id)
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc
    except StoreError as exc:
        logger.warning("Profile lookup failed for user %s: %s", user_id, exc)
        raise store_failure(exc) from exc

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User profile not found", "code": "user_not_found"},
        )

    return profile
