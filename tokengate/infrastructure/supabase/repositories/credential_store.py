"""Supabase-backed credential store (implements ICredentialStore)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from tokengate.application.dtos.api_token import ApiTokenCreate, ApiTokenResult
from tokengate.application.dtos.invite_code import InviteCodeCreate, InviteCodeResult
from tokengate.application.dtos.verification import (
    VerificationRequestCreate,
    VerificationRequestResult,
)
from tokengate.core.constants import (
    TABLE_ADMINS,
    TABLE_API_TOKENS,
    TABLE_INVITE_CODES,
    TABLE_VERIFICATION_REQUESTS,
)
from tokengate.infrastructure.supabase._rest_client import SupabaseRESTClient
from tokengate.shared.utils.datetime import parse_timestamp, utc_now


def _invite_code(row: dict[str, Any]) -> InviteCodeResult:
    return InviteCodeResult(
        id=str(row["id"]),
        code=row["code"],
        created_by=row.get("created_by") or "",
        is_used=bool(row.get("is_used")),
        created_at=parse_timestamp(row.get("created_at")) or utc_now(),
        expires_at=parse_timestamp(row.get("expires_at")),
        used_at=parse_timestamp(row.get("used_at")),
        used_by=row.get("used_by"),
        description=row.get("description"),
    )


def _verification_request(row: dict[str, Any]) -> VerificationRequestResult:
    return VerificationRequestResult(
        id=str(row["id"]),
        email=row["email"],
        token=row["token"],
        invite_code_id=str(row["invite_code_id"]),
        is_verified=bool(row.get("is_verified")),
        created_at=parse_timestamp(row.get("created_at")) or utc_now(),
        expires_at=parse_timestamp(row["expires_at"]),
        verified_at=parse_timestamp(row.get("verified_at")),
    )


def _api_token(row: dict[str, Any]) -> ApiTokenResult:
    invite_code_id = row.get("invite_code_id")
    return ApiTokenResult(
        id=str(row["id"]),
        token=row["token"],
        user_email=row["user_email"],
        created_at=parse_timestamp(row.get("created_at")) or utc_now(),
        is_active=bool(row.get("is_active")),
        invite_code_id=str(invite_code_id) if invite_code_id else None,
        expires_at=parse_timestamp(row.get("expires_at")),
    )


class SupabaseCredentialStore:
    """Credential store over PostgREST. No business rules; rows map to frozen DTOs."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self._client = client

    async def find_invite_code_by_code(self, code: str) -> InviteCodeResult | None:
        """Return the unused invite code with this literal code, or None."""
        row = await (
            self._client.table(TABLE_INVITE_CODES)
            .eq("code", code)
            .is_("is_used", False)
            .first()
        )
        return _invite_code(row) if row else None

    async def insert_invite_code(self, data: InviteCodeCreate) -> InviteCodeResult:
        row = await self._client.table(TABLE_INVITE_CODES).insert({
            "code": data.code,
            "created_by": data.created_by,
            "is_used": False,
            "expires_at": data.expires_at,
            "description": data.description,
        })
        return _invite_code(row)

    async def get_invite_code(self, invite_code_id: str) -> InviteCodeResult | None:
        row = await self._client.table(TABLE_INVITE_CODES).eq("id", invite_code_id).first()
        return _invite_code(row) if row else None

    async def mark_invite_code_used(
        self, invite_code_id: str, used_by: str, used_at: datetime
    ) -> InviteCodeResult | None:
        """Compare-and-set is_used; None when the code was already consumed."""
        rows = await (
            self._client.table(TABLE_INVITE_CODES)
            .eq("id", invite_code_id)
            .is_("is_used", False)
            .update({"is_used": True, "used_by": used_by, "used_at": used_at})
        )
        return _invite_code(rows[0]) if rows else None

    async def insert_verification_request(
        self, data: VerificationRequestCreate
    ) -> VerificationRequestResult:
        row = await self._client.table(TABLE_VERIFICATION_REQUESTS).insert({
            "email": data.email,
            "token": data.token,
            "invite_code_id": data.invite_code_id,
            "is_verified": False,
            "expires_at": data.expires_at,
        })
        return _verification_request(row)

    async def find_verification_request_by_token(
        self, token: str
    ) -> VerificationRequestResult | None:
        row = await self._client.table(TABLE_VERIFICATION_REQUESTS).eq("token", token).first()
        return _verification_request(row) if row else None

    async def mark_verification_verified(
        self, request_id: str, verified_at: datetime
    ) -> VerificationRequestResult | None:
        """Compare-and-set is_verified; None when another caller verified first."""
        rows = await (
            self._client.table(TABLE_VERIFICATION_REQUESTS)
            .eq("id", request_id)
            .is_("is_verified", False)
            .update({"is_verified": True, "verified_at": verified_at})
        )
        return _verification_request(rows[0]) if rows else None

    async def insert_api_token(self, data: ApiTokenCreate) -> ApiTokenResult:
        record: dict[str, Any] = {
            "token": data.token,
            "user_email": data.user_email,
            "is_active": data.is_active,
            "expires_at": data.expires_at,
            "invite_code_id": data.invite_code_id,
        }
        if data.id is not None:
            record["id"] = data.id
        row = await self._client.table(TABLE_API_TOKENS).insert(record)
        return _api_token(row)

    async def get_api_token(self, token_id: str) -> ApiTokenResult | None:
        row = await self._client.table(TABLE_API_TOKENS).eq("id", token_id).first()
        return _api_token(row) if row else None

    async def list_api_tokens(
        self,
        owner_email: str | None = None,
        is_active: bool | None = None,
    ) -> list[ApiTokenResult]:
        """Tokens newest first, optionally filtered by owner and active flag."""
        query = self._client.table(TABLE_API_TOKENS).order("created_at", descending=True)
        if owner_email is not None:
            query = query.eq("user_email", owner_email)
        if is_active is not None:
            query = query.is_("is_active", is_active)
        return [_api_token(row) for row in await query.execute()]

    async def list_api_tokens_for_email(self, email: str) -> list[ApiTokenResult]:
        return await self.list_api_tokens(owner_email=email)

    async def update_api_token(
        self, token_id: str, patch: dict[str, Any]
    ) -> ApiTokenResult | None:
        rows = await self._client.table(TABLE_API_TOKENS).eq("id", token_id).update(patch)
        return _api_token(rows[0]) if rows else None

    async def is_admin(self, email: str) -> bool:
        row = await self._client.table(TABLE_ADMINS).select("id").eq("email", email).first()
        return row is not None

    async def insert_admin(self, email: str) -> None:
        await self._client.table(TABLE_ADMINS).insert({"email": email})
