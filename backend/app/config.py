"""
HomeFit Configuration
=====================
All environment variables in one place. Pydantic Settings validates
types at startup so a malformed value fails at boot, not mid-workout.

Missing credentials are NOT a startup error: the store and billing
layers check ``supabase_configured`` / ``stripe_configured`` once and
swap in a disabled variant that raises ConfigurationError on use.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

PLACEHOLDER_SUPABASE_URL = "https://placeholder.supabase.co"


class ConfigurationError(RuntimeError):
    """Credentials for an external service are missing. Not retryable."""


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Supabase ---
    supabase_url: str = ""
    supabase_key: str = ""

    # --- Stripe ---
    stripe_secret_key: str = ""
    stripe_api_version: str = "2024-12-18.acacia"
    stripe_monthly_price_id: str = ""
    stripe_annual_price_id: str = ""

    # --- App settings ---
    app_url: str = "http://localhost:3000"
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Number of history rows shown on the progress screen
    history_limit: int = 10

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def supabase_configured(self) -> bool:
        return bool(
            self.supabase_url
            and self.supabase_key
            and self.supabase_url != PLACEHOLDER_SUPABASE_URL
        )

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
