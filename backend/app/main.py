"""
HomeFit API
===========
FastAPI application entry point. Mount routers here.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import auth, billing, onboarding, profile, sessions, workouts

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="HomeFit API",
    description="Guided home workouts with progress tracking and a premium tier.",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(onboarding.router)
app.include_router(workouts.router)
app.include_router(sessions.router)
app.include_router(profile.router)
app.include_router(billing.router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {
        "status": "ok",
        "service": "homefit-api",
        "supabase_configured": settings.supabase_configured,
        "stripe_configured": settings.stripe_configured,
    }
