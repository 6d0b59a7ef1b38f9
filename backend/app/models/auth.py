"""
Auth Schemas
============
Email/password sign-up and sign-in against Supabase Auth.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Session tokens, or only ``user_id`` when email confirmation is pending."""

    user_id: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
