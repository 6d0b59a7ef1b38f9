"""
Supabase Client
===============
Provides a configured Supabase client for the profile store and the
auth helper.

The client is only built when both the project URL and key are set.
Callers that reach this without credentials get a ConfigurationError
instead of a client that fails on every request.
"""

from functools import lru_cache

from supabase import Client, create_client

from app.config import ConfigurationError, Settings, get_settings


def _build_client(settings: Settings) -> Client:
    if not settings.supabase_configured:
        raise ConfigurationError(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY "
            "to enable sign-in and progress tracking."
        )
    return create_client(settings.supabase_url, settings.supabase_key)


@lru_cache
def get_supabase_client() -> Client:
    return _build_client(get_settings())


def new_supabase_client() -> Client:
    """Uncached client for sign-in and sign-up.

    Signing in stores the user's session on the client it was called on,
    so it must not run against the shared client the store uses.
    """
    return _build_client(get_settings())
