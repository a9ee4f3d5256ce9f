"""Supabase integration over REST (PostgREST, GoTrue)."""

from tokengate.infrastructure.supabase._rest_client import SupabaseRESTClient
from tokengate.infrastructure.supabase.auth_client import SupabaseAuthClient
from tokengate.infrastructure.supabase.client import (
    close_supabase,
    get_auth_client,
    get_supabase_client,
    init_supabase,
)

__all__ = [
    "SupabaseAuthClient",
    "SupabaseRESTClient",
    "close_supabase",
    "get_auth_client",
    "get_supabase_client",
    "init_supabase",
]
