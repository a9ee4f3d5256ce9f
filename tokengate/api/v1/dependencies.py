"""Presentation-layer dependency injection (composition root).

Collaborators (store, auth provider, email sender) are created in the
lifespan and kept on app.state; services are built per request from them.
Routes depend only on these functions, never on infrastructure directly,
so tests swap collaborators through app.state or dependency_overrides.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request

from tokengate.application.dtos.identity import Identity
from tokengate.application.interfaces.repositories import ICredentialStore, IUsageStatsStore
from tokengate.application.interfaces.services import IEmailSender, IIdentityProvider
from tokengate.application.services import (
    TokenLifecycleManager,
    UsageStatsService,
    VerificationPipeline,
)
from tokengate.core.config import Settings, get_settings
from tokengate.core.constants import IDENTITY_STATE_KEY
from tokengate.domain.exceptions import AuthenticationException, AuthorizationException


def _from_state(request: Request, name: str) -> Any:
    """Return a lifespan-created collaborator or raise 503 when Supabase is not wired."""
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=503,
            detail="Backend not configured (set SUPABASE_URL and SUPABASE_ANON_KEY)",
        )
    return value


def get_store(request: Request) -> ICredentialStore:
    return _from_state(request, "credential_store")


def get_usage_stats_store(request: Request) -> IUsageStatsStore:
    return _from_state(request, "usage_stats_store")


def get_identity_provider(request: Request) -> IIdentityProvider:
    return _from_state(request, "identity_provider")


def get_email_sender(request: Request) -> IEmailSender:
    return _from_state(request, "email_sender")


def get_token_manager(
    store: Annotated[ICredentialStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenLifecycleManager:
    return TokenLifecycleManager(store, default_validity_days=settings.token_validity_days)


def get_pipeline(
    store: Annotated[ICredentialStore, Depends(get_store)],
    email_sender: Annotated[IEmailSender, Depends(get_email_sender)],
    token_manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VerificationPipeline:
    """Verification pipeline wired to the store, email sender and token manager."""
    return VerificationPipeline(
        store=store,
        email_sender=email_sender,
        token_manager=token_manager,
        verification_base_url=settings.verification_base_url,
        verification_ttl=timedelta(hours=settings.verification_ttl_hours),
        token_validity_days=settings.token_validity_days,
    )


def get_stats_service(
    store: Annotated[IUsageStatsStore, Depends(get_usage_stats_store)],
) -> UsageStatsService:
    return UsageStatsService(store)


def get_identity(request: Request) -> Identity | None:
    """Identity resolved by the access gate for this request (None if anonymous)."""
    return request.scope.get("state", {}).get(IDENTITY_STATE_KEY)


async def require_identity(
    identity: Annotated[Identity | None, Depends(get_identity)],
) -> Identity:
    """Route guard: a verified identity is required (401 otherwise)."""
    if identity is None:
        raise AuthenticationException()
    return identity


async def require_admin(
    identity: Annotated[Identity, Depends(require_identity)],
    store: Annotated[ICredentialStore, Depends(get_store)],
) -> Identity:
    """Route guard: identity must have an admins row (403 otherwise).

    Uses the gate's admin flag when it was resolved; otherwise asks the store.
    """
    is_admin = identity.is_admin
    if is_admin is None:
        is_admin = await store.is_admin(identity.email)
    if not is_admin:
        raise AuthorizationException(message="Admin access required")
    return identity


CurrentIdentity = Annotated[Identity, Depends(require_identity)]
AdminIdentity = Annotated[Identity, Depends(require_admin)]
