"""Supabase client for the Python backend."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import Settings, settings


@lru_cache()
def get_supabase_client(url: str | None = None, key: str | None = None) -> Client | None:
    """Get a cached Supabase client for the given credentials.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not url or not key:
        logging.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


def client_from_settings(config: Settings | None = None) -> Client | None:
    config = config or settings
    return get_supabase_client(config.supabase_url, config.supabase_key)
