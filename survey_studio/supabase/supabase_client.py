"""Supabase client singleton — import get_supabase() anywhere."""
from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client

from survey_studio.config import get_settings
from survey_studio.errors import ConfigurationError


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set in .env")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as e:
        raise ConfigurationError(f"Could not create Supabase client: {e}") from e
