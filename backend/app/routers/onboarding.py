"""
Onboarding Router
=================
GET /api/v1/onboarding - The intro slides shown before the home screen.
"""

from __future__ import annotations

from fastapi import APIRouter

from app.models.workout import OnboardingSlide
from app.services.catalog import ONBOARDING_SLIDES

router = APIRouter(prefix="/api/v1/onboarding", tags=["onboarding"])


@router.get("", response_model=list[OnboardingSlide], summary="Onboarding slides")
async def get_onboarding() -> list[OnboardingSlide]:
    return list(ONBOARDING_SLIDES)
