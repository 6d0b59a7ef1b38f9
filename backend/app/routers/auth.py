"""
Auth Router
===========
POST /api/v1/auth/signup - Register with email, password and display name.
POST /api/v1/auth/signin - Exchange email + password for a session.

Thin pass-through to Supabase Auth. The display name goes into the auth
user's metadata; the user_profiles row is created from it by a database
trigger, not by this API. Each call uses its own client so the user
session never leaks into the shared store client.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.auth import service_unavailable
from app.config import ConfigurationError
from app.db.supabase import new_supabase_client
from app.models.auth import AuthResponse, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _to_response(auth_response) -> AuthResponse:
    session = auth_response.session
    return AuthResponse(
        user_id=auth_response.user.id,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        400: {"description": "Supabase rejected the sign-up"},
        503: {"description": "Authentication is not configured"},
    },
)
async def sign_up(body: SignUpRequest) -> AuthResponse:
    try:
        client = new_supabase_client()
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc

    try:
        result = client.auth.sign_up({
            "email": body.email,
            "password": body.password,
            "options": {"data": {"name": body.name}},
        })
    except Exception as exc:
        logger.warning("Sign-up failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": str(exc) or "Sign-up failed", "code": "signup_failed"},
        ) from exc

    if not result or not result.user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Sign-up failed", "code": "signup_failed"},
        )

    return _to_response(result)


@router.post(
    "/signin",
    response_model=AuthResponse,
    summary="Sign in",
    responses={
        401: {"description": "Wrong email or password"},
        503: {"description": "Authentication is not configured"},
    },
)
async def sign_in(body: SignInRequest) -> AuthResponse:
    try:
        client = new_supabase_client()
    except ConfigurationError as exc:
        raise service_unavailable(exc) from exc

    try:
        result = client.auth.sign_in_with_password({
            "email": body.email,
            "password": body.password,
        })
    except Exception as exc:
        logger.warning("Sign-in failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid email or password", "code": "auth_invalid"},
        ) from exc

    if not result or not result.user or not result.session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid email or password", "code": "auth_invalid"},
        )

    return _to_response(result)
