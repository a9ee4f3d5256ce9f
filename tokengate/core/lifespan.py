"""Application lifespan: startup and shutdown.

Startup wires, in order: telemetry (so httpx is instrumented before the
client exists), one shared HTTP client, the Supabase clients, and the
collaborators the access gate and route dependencies read from app.state.
Shutdown releases them in reverse.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from tokengate.core.config import get_settings
from tokengate.infrastructure.external.email import EdgeFunctionEmailSender
from tokengate.infrastructure.supabase import (
    close_supabase,
    get_auth_client,
    get_supabase_client,
    init_supabase,
)
from tokengate.infrastructure.supabase.repositories import (
    SupabaseCredentialStore,
    SupabaseUsageStatsStore,
)
from tokengate.shared.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)

COLLABORATORS = ("credential_store", "usage_stats_store", "identity_provider", "email_sender")


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    app.state.telemetry = None
    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument(app)
        app.state.telemetry = telemetry

    app.state.http_client = httpx.AsyncClient(timeout=settings.supabase_timeout_seconds)

    if init_supabase(app.state.http_client):
        rest_client = get_supabase_client()
        app.state.credential_store = SupabaseCredentialStore(rest_client)
        app.state.usage_stats_store = SupabaseUsageStatsStore(rest_client)
        app.state.identity_provider = get_auth_client()
        app.state.email_sender = EdgeFunctionEmailSender(
            settings.supabase_url,
            settings.supabase_anon_key.get_secret_value(),
            http_client=app.state.http_client,
        )
        logger.info("Supabase collaborators ready (%s)", settings.supabase_url)
    else:
        logger.error("Supabase not configured; token and admin endpoints will return 503")

    yield

    await close_supabase()
    for name in COLLABORATORS:
        setattr(app.state, name, None)
    await app.state.http_client.aclose()
    app.state.http_client = None

    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None
