from typing import Optional

from supabase import Client, ClientOptions, create_client

from . import config

# Global client - set during app startup
_supabase_client: Client | None = None


def set_supabase_client(client: Client | None) -> None:
    """Set the global Supabase client (called from app lifespan)."""
    global _supabase_client
    _supabase_client = client


def get_supabase() -> Client | None:
    """Get or create the shared Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        key = config.SUPABASE_SECRET_KEY or config.SUPABASE_ANON_KEY
        if config.SUPABASE_URL and key:
            _supabase_client = create_client(config.SUPABASE_URL, key)
    return _supabase_client


def create_user_client(authorization: Optional[str]) -> Client | None:
    """Client acting on behalf of the caller, so row-level policies apply."""
    if not (config.SUPABASE_URL and config.SUPABASE_ANON_KEY):
        return None
    headers = {"Authorization": authorization} if authorization else {}
    return create_client(
        config.SUPABASE_URL,
        config.SUPABASE_ANON_KEY,
        options=ClientOptions(headers=headers),
    )
