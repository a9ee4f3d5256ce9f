"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Every method is a network call and may raise BackendUnavailableException
or BackendAuthorizationException.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from tokengate.application.dtos.api_token import ApiTokenCreate, ApiTokenResult
    from tokengate.application.dtos.invite_code import InviteCodeCreate, InviteCodeResult
    from tokengate.application.dtos.stats import ApiLogResult
    from tokengate.application.dtos.verification import (
        VerificationRequestCreate,
        VerificationRequestResult,
    )


class ICredentialStore(Protocol):
    """Protocol for the credential store (invite codes, verification requests, tokens, admins)."""

    async def find_invite_code_by_code(self, code: str) -> InviteCodeResult | None:
        """Return the unused invite code with this literal code, or None."""

    async def insert_invite_code(self, data: InviteCodeCreate) -> InviteCodeResult:
        """Create an invite code."""

    async def get_invite_code(self, invite_code_id: str) -> InviteCodeResult | None:
        """Return invite code by ID, used or not."""

    async def mark_invite_code_used(
        self, invite_code_id: str, used_by: str, used_at: datetime
    ) -> InviteCodeResult | None:
        """Set is_used only if still unused; None when another caller consumed it first."""

    async def insert_verification_request(
        self, data: VerificationRequestCreate
    ) -> VerificationRequestResult:
        """Create a verification request (ConstraintViolationException on token collision)."""

    async def find_verification_request_by_token(
        self, token: str
    ) -> VerificationRequestResult | None:
        """Return the verification request for token, or None."""

    async def mark_verification_verified(
        self, request_id: str, verified_at: datetime
    ) -> VerificationRequestResult | None:
        """Set is_verified only if still unverified; None when already verified."""

    async def insert_api_token(self, data: ApiTokenCreate) -> ApiTokenResult:
        """Create an API token."""

    async def get_api_token(self, token_id: str) -> ApiTokenResult | None:
        """Return token by ID."""

    async def list_api_tokens(
        self,
        owner_email: str | None = None,
        is_active: bool | None = None,
    ) -> list[ApiTokenResult]:
        """Return tokens (newest first), optionally filtered by owner and active flag."""

    async def list_api_tokens_for_email(self, email: str) -> list[ApiTokenResult]:
        """Return the tokens owned by email (newest first)."""

    async def update_api_token(
        self, token_id: str, patch: dict[str, Any]
    ) -> ApiTokenResult | None:
        """Apply patch to token; None if no such token."""

    async def is_admin(self, email: str) -> bool:
        """Return True if email has an admins row."""

    async def insert_admin(self, email: str) -> None:
        """Grant admin to email."""


class IUsageStatsStore(Protocol):
    """Protocol for read-only usage data (api_logs and aggregate functions)."""

    async def list_api_logs(self, limit: int, offset: int) -> list[ApiLogResult]:
        """Return API logs newest first, joined with the owning token's email."""

    async def count_api_logs(
        self,
        since: datetime | None = None,
        response_time_min: float | None = None,
        response_time_max: float | None = None,
        with_response_time: bool = False,
    ) -> int:
        """Exact count of api_logs rows matching the filters."""

    async def count_api_tokens(self, is_active: bool | None = None) -> int:
        """Exact count of api_tokens rows (optionally by active flag)."""

    async def list_token_owner_emails(self) -> list[str]:
        """Return user_email of every token (one entry per token)."""

    async def call_aggregate(self, name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Call a named aggregation function and return its rows."""
