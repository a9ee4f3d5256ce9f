"""Transactional email via Supabase Edge Functions (implements IEmailSender).

The functions own templates and the mail provider; this client only posts
the payload. Any non-2xx or transport fault raises EmailFunctionError
(a DeliveryException). Tokens are never logged.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from tokengate.core.constants import (
    FUNCTION_SEND_TOKEN_EMAIL,
    FUNCTION_SEND_VERIFICATION_EMAIL,
)
from tokengate.infrastructure.exceptions import EmailFunctionError
from tokengate.shared.utils.datetime import to_iso

logger = logging.getLogger(__name__)

_FUNCTIONS_PATH = "/functions/v1"


class EdgeFunctionEmailSender:
    """Posts JSON to {SUPABASE_URL}/functions/v1/<name> with the project key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.functions_url = f"{base_url.rstrip('/')}{_FUNCTIONS_PATH}"
        self._api_key = api_key
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _invoke(self, function_name: str, payload: dict[str, Any]) -> None:
        try:
            resp = await self._http.post(
                f"{self.functions_url}/{function_name}",
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise EmailFunctionError(function_name, None, type(exc).__name__) from exc
        if resp.status_code >= 300:
            raise EmailFunctionError(function_name, resp.status_code, resp.text[:300])
        logger.info("Edge function %s accepted message for %s", function_name, payload.get("email"))

    async def send_verification_email(
        self,
        email: str,
        name: str,
        verification_token: str,
        verification_url: str,
    ) -> None:
        await self._invoke(
            FUNCTION_SEND_VERIFICATION_EMAIL,
            {
                "email": email,
                "name": name,
                "verificationToken": verification_token,
                "verificationUrl": verification_url,
            },
        )

    async def send_token_email(
        self, email: str, token: str, expires_at: datetime | None
    ) -> None:
        await self._invoke(
            FUNCTION_SEND_TOKEN_EMAIL,
            {
                "email": email,
                "token": token,
                "expiresAt": to_iso(expires_at) if expires_at else None,
            },
        )
