"""Supabase-backed repository implementations."""

from tokengate.infrastructure.supabase.repositories.credential_store import (
    SupabaseCredentialStore,
)
from tokengate.infrastructure.supabase.repositories.usage_stats_repo import (
    SupabaseUsageStatsStore,
)

__all__ = [
    "SupabaseCredentialStore",
    "SupabaseUsageStatsStore",
]
