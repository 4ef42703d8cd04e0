from __future__ import annotations

from smart_task_ai.config import Settings
from smart_task_ai.integrations.supabase.auth import AuthError, SupabaseAuthClient, parse_session, parse_user
from smart_task_ai.integrations.supabase.client import StoreWriteError, SupabaseError, SupabaseRestClient

__all__ = [
    "AuthError",
    "StoreWriteError",
    "SupabaseAuthClient",
    "SupabaseError",
    "SupabaseRestClient",
    "build_auth_client",
    "build_rest_client",
    "parse_session",
    "parse_user",
]


def build_rest_client(settings: Settings, *, access_token: str | None = None) -> SupabaseRestClient:
    return SupabaseRestClient(
        url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        access_token=access_token,
    )


def build_auth_client(settings: Settings) -> SupabaseAuthClient:
    return SupabaseAuthClient(url=settings.supabase_url, api_key=settings.supabase_anon_key)
