"""Access gate middleware.

Resolves the caller's identity once per request by asking the auth provider
to verify the session token (cookie or Bearer header), stores it on
scope["state"]["identity"], and redirects:

- protected paths without an identity -> login page with ?redirectTo=<path>
- admin paths for a non-admin identity -> non-admin landing page

When the provider or the admin lookup fails, protected paths pass through
to the route guards (which still require an identity), while admin paths
are redirected away unless admin_fail_closed is False.

Collaborators are read from app.state (identity_provider, credential_store)
at request time, since they are created in the lifespan.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Callable
from urllib.parse import urlencode

from tokengate.application.dtos.identity import Identity
from tokengate.core.constants import IDENTITY_STATE_KEY
from tokengate.domain.exceptions import (
    BackendAuthorizationException,
    BackendUnavailableException,
)
from tokengate.middleware._asgi import get_cookie, get_header, send_redirect

logger = logging.getLogger(__name__)

_LOOKUP_ERRORS = (BackendUnavailableException, BackendAuthorizationException)


def path_matches(path: str, prefixes: Sequence[str]) -> bool:
    """True when path equals a prefix or sits below it (/admin matches /admin/x, not /administrator)."""
    return any(path == p or path.startswith(p.rstrip("/") + "/") for p in prefixes)


def extract_access_token(scope: dict, cookie_name: str) -> str | None:
    """Session token from the auth cookie, else from Authorization: Bearer."""
    token = get_cookie(scope, cookie_name)
    if token:
        return token
    auth = get_header(scope, "authorization")
    if auth and auth[:7].lower() == "bearer ":
        return auth[7:].strip() or None
    return None


def AccessGateMiddleware(
    app: Callable,
    *,
    protected_prefixes: Sequence[str],
    admin_prefixes: Sequence[str],
    login_path: str = "/login",
    non_admin_path: str = "/manage",
    redirect_param: str = "redirectTo",
    cookie_name: str = "sb-access-token",
    admin_fail_closed: bool = True,
) -> Callable:
    """Identity resolution and path-based redirects. Raw ASGI."""

    def login_redirect(path: str) -> str:
        return f"{login_path}?{urlencode({redirect_param: path})}"

    async def resolve_identity(scope: dict, token: str) -> tuple[Identity | None, bool]:
        """Return (identity, lookup_failed)."""
        provider = getattr(scope["app"].state, "identity_provider", None)
        if provider is None:
            logger.warning("Access gate has no identity provider; treating lookup as failed")
            return None, True
        try:
            return await provider.get_user(token), False
        except _LOOKUP_ERRORS as exc:
            logger.warning("Identity lookup failed for %s: %s", scope.get("path"), exc)
            return None, True

    async def resolve_admin(scope: dict, identity: Identity) -> bool | None:
        """Admin flag, or None when the lookup failed."""
        store = getattr(scope["app"].state, "credential_store", None)
        if store is None:
            logger.warning("Access gate has no credential store; admin status unknown")
            return None
        try:
            return await store.is_admin(identity.email)
        except _LOOKUP_ERRORS as exc:
            logger.warning("Admin lookup failed for user %s: %s", identity.user_id, exc)
            return None

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        path = scope.get("path", "")
        is_protected = path_matches(path, protected_prefixes)
        is_admin_path = path_matches(path, admin_prefixes)

        identity: Identity | None = None
        lookup_failed = False
        token = extract_access_token(scope, cookie_name)
        if token:
            identity, lookup_failed = await resolve_identity(scope, token)
        if identity is not None and is_admin_path:
            identity = replace(identity, is_admin=await resolve_admin(scope, identity))
        if identity is not None:
            scope.setdefault("state", {})[IDENTITY_STATE_KEY] = identity

        if is_protected and identity is None and not lookup_failed:
            await send_redirect(send, login_redirect(path))
            return
        if is_admin_path:
            if identity is not None and identity.is_admin is False:
                await send_redirect(send, non_admin_path)
                return
            unknown = lookup_failed or (identity is not None and identity.is_admin is None)
            if unknown and admin_fail_closed:
                logger.warning("Admin path %s denied: identity or admin status unavailable", path)
                await send_redirect(send, non_admin_path)
                return

        await app(scope, receive, send)

    return asgi_app
