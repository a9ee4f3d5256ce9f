"""Supabase GoTrue client (implements IIdentityProvider).

Talks to {SUPABASE_URL}/auth/v1 over httpx. Identity is always resolved by
asking GoTrue (GET /user); the JWT in the cookie is never decoded locally.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from tokengate.application.dtos.identity import AuthSession, Identity
from tokengate.domain.exceptions import (
    AuthenticationException,
    BackendAuthorizationException,
    ConstraintViolationException,
    ValidationException,
)
from tokengate.infrastructure.exceptions import AuthProviderUnavailableError
from tokengate.shared.utils.sanitization import normalize_email

logger = logging.getLogger(__name__)

_AUTH_PATH = "/auth/v1"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def _error_text(resp: httpx.Response) -> str:
    """GoTrue errors come as {msg}, {error_description} or {message}."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300]
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)[:300]


def _identity_from_user(user: dict[str, Any]) -> Identity:
    return Identity(
        user_id=str(user.get("id", "")), email=normalize_email(user.get("email") or "")
    )


class SupabaseAuthClient:
    """GoTrue REST client. The anon key authorizes user calls; the service key admin calls."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        service_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.auth_url = f"{base_url.rstrip('/')}{_AUTH_PATH}"
        self._anon_key = anon_key
        self._service_key = service_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _headers(self, bearer: str | None = None, *, admin: bool = False) -> dict[str, str]:
        key = self._service_key if admin and self._service_key else self._anon_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {bearer or key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one GoTrue request; transport faults and 5xx become AuthProviderUnavailableError."""
        try:
            resp = await self._http.request(
                method, f"{self.auth_url}{path}", headers=headers, params=params, json=body
            )
        except httpx.HTTPError as exc:
            raise AuthProviderUnavailableError(operation, None, type(exc).__name__) from exc
        if resp.status_code >= 500:
            raise AuthProviderUnavailableError(operation, resp.status_code, _error_text(resp))
        return resp

    async def get_user(self, access_token: str) -> Identity | None:
        """Verify access_token with GoTrue; None if invalid or expired."""
        if not access_token:
            return None
        resp = await self._request(
            "GET", "/user", operation="get_user", headers=self._headers(access_token)
        )
        if resp.status_code in (401, 403, 404):
            return None
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("get_user", resp.status_code, _error_text(resp))
        return _identity_from_user(resp.json())

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password grant. Bad credentials raise AuthenticationException."""
        resp = await self._request(
            "POST",
            "/token",
            operation="sign_in",
            headers=self._headers(),
            params={"grant_type": "password"},
            body={"email": email, "password": password},
        )
        if resp.status_code in (400, 401, 403, 422):
            logger.info("Sign-in rejected (status=%s): %s", resp.status_code, _error_text(resp))
            raise AuthenticationException(INVALID_CREDENTIALS_MESSAGE)
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("sign_in", resp.status_code, _error_text(resp))
        data = resp.json()
        user = data.get("user") or {}
        return AuthSession(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            user_id=str(user.get("id", "")),
            email=normalize_email(user.get("email") or email),
        )

    async def sign_up(self, email: str, password: str) -> Identity:
        """Register an account; GoTrue sends the confirmation email."""
        resp = await self._request(
            "POST",
            "/signup",
            operation="sign_up",
            headers=self._headers(),
            body={"email": email, "password": password},
        )
        if resp.status_code in (400, 422):
            raise ValidationException(_error_text(resp), field="password")
        if resp.status_code == 429:
            raise ValidationException("Too many sign-up attempts; try again later")
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("sign_up", resp.status_code, _error_text(resp))
        data = resp.json()
        # autoconfirm projects wrap the user in a session payload
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        return _identity_from_user(user)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session; an already-invalid token is treated as signed out."""
        resp = await self._request(
            "POST", "/logout", operation="sign_out", headers=self._headers(access_token)
        )
        if resp.status_code in (401, 403, 404):
            logger.debug("Sign-out with an invalid session (status=%s)", resp.status_code)
            return
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("sign_out", resp.status_code, _error_text(resp))

    async def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        """Ask GoTrue to email a recovery link."""
        params = {"redirect_to": redirect_to} if redirect_to else None
        resp = await self._request(
            "POST",
            "/recover",
            operation="recover",
            headers=self._headers(),
            params=params,
            body={"email": email},
        )
        if resp.status_code == 429:
            raise ValidationException("Too many reset requests; try again later")
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("recover", resp.status_code, _error_text(resp))

    async def create_user(self, email: str, password: str, *, email_confirm: bool = True) -> Identity:
        """Create a confirmed user via the admin API (requires the service key)."""
        if not self._service_key:
            raise BackendAuthorizationException("SUPABASE_SERVICE_KEY is required to create users")
        resp = await self._request(
            "POST",
            "/admin/users",
            operation="admin_create_user",
            headers=self._headers(admin=True),
            body={"email": email, "password": password, "email_confirm": email_confirm},
        )
        if resp.status_code in (401, 403):
            raise BackendAuthorizationException(_error_text(resp))
        if resp.status_code == 422 and "already" in _error_text(resp).lower():
            raise ConstraintViolationException("user")
        if resp.status_code in (400, 422):
            raise ValidationException(_error_text(resp))
        if resp.status_code >= 400:
            raise AuthProviderUnavailableError("admin_create_user", resp.status_code, _error_text(resp))
        return _identity_from_user(resp.json())
