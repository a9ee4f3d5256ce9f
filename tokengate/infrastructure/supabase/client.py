"""Supabase clients (REST-based, no supabase-py).

Initialized at app startup from SUPABASE_URL and the service (or anon) key.
The PostgREST client and the GoTrue auth client share one httpx.AsyncClient,
normally the one the lifespan keeps on app.state.
"""

import logging

import httpx

from tokengate.core.config import get_settings
from tokengate.infrastructure.supabase._rest_client import SupabaseRESTClient
from tokengate.infrastructure.supabase.auth_client import SupabaseAuthClient

logger = logging.getLogger(__name__)

_rest_client: SupabaseRESTClient | None = None
_auth_client: SupabaseAuthClient | None = None


def init_supabase(http_client: httpx.AsyncClient | None = None) -> bool:
    """Create the Supabase REST and auth clients.

    Idempotent if already initialized. Returns False (and logs) when the
    configuration is unusable so the app can still serve health checks.
    """
    global _rest_client, _auth_client
    if _rest_client is not None and _auth_client is not None:
        return True
    settings = get_settings()
    try:
        _rest_client = SupabaseRESTClient(
            settings.supabase_url,
            settings.store_key,
            http_client=http_client,
            timeout=settings.supabase_timeout_seconds,
        )
        service_key = (
            settings.supabase_service_key.get_secret_value()
            if settings.supabase_service_key
            else None
        )
        _auth_client = SupabaseAuthClient(
            settings.supabase_url,
            settings.supabase_anon_key.get_secret_value(),
            service_key=service_key,
            http_client=http_client,
            timeout=settings.supabase_timeout_seconds,
        )
    except (ValueError, httpx.InvalidURL):
        logger.exception("Supabase client initialization failed")
        _rest_client = None
        _auth_client = None
        return False
    if service_key is None:
        logger.warning(
            "SUPABASE_SERVICE_KEY not set; store calls use the anon key and depend on row-level policies"
        )
    logger.info("Supabase clients initialized for %s", settings.supabase_url)
    return True


def get_supabase_client() -> SupabaseRESTClient | None:
    """Return the PostgREST client, or None if not initialized."""
    return _rest_client


def get_auth_client() -> SupabaseAuthClient | None:
    """Return the GoTrue client, or None if not initialized."""
    return _auth_client


async def close_supabase() -> None:
    """Close client-owned HTTP pools. Call from app shutdown."""
    global _rest_client, _auth_client
    if _rest_client is not None:
        await _rest_client.aclose()
        _rest_client = None
    if _auth_client is not None:
        await _auth_client.aclose()
        _auth_client = None
    logger.info("Supabase clients closed")
