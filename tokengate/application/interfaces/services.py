"""Service interfaces (ports) for the application layer.

Protocols define contracts for the external collaborators (DIP): the
email-sending functions and the auth provider.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tokengate.application.dtos.identity import AuthSession, Identity


class IEmailSender(Protocol):
    """Protocol for transactional email. Non-2xx raises DeliveryException."""

    async def send_verification_email(
        self,
        email: str,
        name: str,
        verification_token: str,
        verification_url: str,
    ) -> None:
        """Send the verification link."""

    async def send_token_email(
        self, email: str, token: str, expires_at: datetime | None
    ) -> None:
        """Send the issued API token."""


class IIdentityProvider(Protocol):
    """Protocol for the auth provider (session-token based identity)."""

    async def get_user(self, access_token: str) -> Identity | None:
        """Verify access_token with the provider; None if invalid or expired."""

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password sign-in; AuthenticationException on bad credentials."""

    async def sign_up(self, email: str, password: str) -> Identity:
        """Register an account."""

    async def sign_out(self, access_token: str) -> None:
        """Invalidate the session behind access_token."""

    async def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        """Ask the provider to email a password-reset link."""
