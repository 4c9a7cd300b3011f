from __future__ import annotations

from supabase import Client, create_client

from ..config import Settings


def get_supabase_client(settings: Settings) -> Client:
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError(
            "Missing SUPABASE env vars. Need SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (preferred)."
        )
    return create_client(settings.supabase_url, settings.supabase_key)
