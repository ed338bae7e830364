from functools import lru_cache

from supabase import create_client, Client

from jobportal.config import get_settings


@lru_cache()
def get_supabase() -> Client:
    """Return the process-wide Supabase client, creating it on first use."""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_key)
