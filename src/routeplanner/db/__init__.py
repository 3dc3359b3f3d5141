"""Database clients and utilities."""

from .supabase import client_from_settings, get_supabase_client

__all__ = ["client_from_settings", "get_supabase_client"]
