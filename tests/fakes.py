"""In-memory collaborators for service and API tests.

InMemoryCredentialStore honours the store contract, including the
conditional (compare-and-set) updates and primary-key uniqueness, so
single-use behaviour can be tested without Supabase.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

from tokengate.application.dtos.api_token import ApiTokenCreate, ApiTokenResult
from tokengate.application.dtos.identity import AuthSession, Identity
from tokengate.application.dtos.invite_code import InviteCodeCreate, InviteCodeResult
from tokengate.application.dtos.verification import (
    VerificationRequestCreate,
    VerificationRequestResult,
)
from tokengate.domain.exceptions import (
    AuthenticationException,
    BackendUnavailableException,
    ConstraintViolationException,
    DeliveryException,
)
from tokengate.shared.utils.datetime import utc_now


def _new_id() -> str:
    return str(uuid.uuid4())


class InMemoryCredentialStore:
    """ICredentialStore backed by dicts. Set fail_on to an op name to make it raise."""

    def __init__(self) -> None:
        self.invite_codes: dict[str, InviteCodeResult] = {}
        self.verification_requests: dict[str, VerificationRequestResult] = {}
        self.api_tokens: dict[str, ApiTokenResult] = {}
        self.admins: set[str] = set()
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if op in self.fail_on:
            raise BackendUnavailableException(details={"operation": op})

    # seeding helpers
    def add_invite_code(
        self,
        code: str = "WELCOME-2025",
        *,
        is_used: bool = False,
        expires_at: datetime | None = None,
    ) -> InviteCodeResult:
        invite = InviteCodeResult(
            id=_new_id(),
            code=code,
            created_by="admin@example.com",
            is_used=is_used,
            created_at=utc_now(),
            expires_at=expires_at,
        )
        self.invite_codes[invite.id] = invite
        return invite

    def add_api_token(
        self,
        user_email: str,
        *,
        is_active: bool = True,
        expires_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> ApiTokenResult:
        token = ApiTokenResult(
            id=_new_id(),
            token=f"tok-{uuid.uuid4().hex}",
            user_email=user_email,
            created_at=created_at or utc_now(),
            is_active=is_active,
            expires_at=expires_at if expires_at is not None else utc_now() + timedelta(days=30),
        )
        self.api_tokens[token.id] = token
        return token

    # ICredentialStore
    async def find_invite_code_by_code(self, code: str) -> InviteCodeResult | None:
        self._enter("find_invite_code_by_code")
        for invite in self.invite_codes.values():
            if invite.code == code and not invite.is_used:
                return invite
        return None

    async def insert_invite_code(self, data: InviteCodeCreate) -> InviteCodeResult:
        self._enter("insert_invite_code")
        if any(i.code == data.code for i in self.invite_codes.values()):
            raise ConstraintViolationException("invite_codes")
        invite = InviteCodeResult(
            id=_new_id(),
            code=data.code,
            created_by=data.created_by,
            is_used=False,
            created_at=utc_now(),
            expires_at=data.expires_at,
            description=data.description,
        )
        self.invite_codes[invite.id] = invite
        return invite

    async def get_invite_code(self, invite_code_id: str) -> InviteCodeResult | None:
        self._enter("get_invite_code")
        return self.invite_codes.get(invite_code_id)

    async def mark_invite_code_used(
        self, invite_code_id: str, used_by: str, used_at: datetime
    ) -> InviteCodeResult | None:
        self._enter("mark_invite_code_used")
        invite = self.invite_codes.get(invite_code_id)
        if invite is None or invite.is_used:
            return None
        updated = replace(invite, is_used=True, used_by=used_by, used_at=used_at)
        self.invite_codes[invite_code_id] = updated
        return updated

    async def insert_verification_request(
        self, data: VerificationRequestCreate
    ) -> VerificationRequestResult:
        self._enter("insert_verification_request")
        if any(r.token == data.token for r in self.verification_requests.values()):
            raise ConstraintViolationException("verification_requests")
        request = VerificationRequestResult(
            id=_new_id(),
            email=data.email,
            token=data.token,
            invite_code_id=data.invite_code_id,
            is_verified=False,
            created_at=utc_now(),
            expires_at=data.expires_at,
        )
        self.verification_requests[request.id] = request
        return request

    async def find_verification_request_by_token(
        self, token: str
    ) -> VerificationRequestResult | None:
        self._enter("find_verification_request_by_token")
        for request in self.verification_requests.values():
            if request.token == token:
                return request
        return None

    async def mark_verification_verified(
        self, request_id: str, verified_at: datetime
    ) -> VerificationRequestResult | None:
        self._enter("mark_verification_verified")
        request = self.verification_requests.get(request_id)
        if request is None or request.is_verified:
            return None
        updated = replace(request, is_verified=True, verified_at=verified_at)
        self.verification_requests[request_id] = updated
        return updated

    async def insert_api_token(self, data: ApiTokenCreate) -> ApiTokenResult:
        self._enter("insert_api_token")
        token_id = data.id or _new_id()
        if token_id in self.api_tokens:
            raise ConstraintViolationException("api_tokens")
        token = ApiTokenResult(
            id=token_id,
            token=data.token,
            user_email=data.user_email,
            created_at=utc_now(),
            is_active=data.is_active,
            invite_code_id=data.invite_code_id,
            expires_at=data.expires_at,
        )
        self.api_tokens[token_id] = token
        return token

    async def get_api_token(self, token_id: str) -> ApiTokenResult | None:
        self._enter("get_api_token")
        return self.api_tokens.get(token_id)

    async def list_api_tokens(
        self,
        owner_email: str | None = None,
        is_active: bool | None = None,
    ) -> list[ApiTokenResult]:
        self._enter("list_api_tokens")
        tokens = [
            t
            for t in self.api_tokens.values()
            if (owner_email is None or t.user_email == owner_email)
            and (is_active is None or t.is_active == is_active)
        ]
        return sorted(tokens, key=lambda t: t.created_at, reverse=True)

    async def list_api_tokens_for_email(self, email: str) -> list[ApiTokenResult]:
        return await self.list_api_tokens(owner_email=email)

    async def update_api_token(
        self, token_id: str, patch: dict[str, Any]
    ) -> ApiTokenResult | None:
        self._enter("update_api_token")
        token = self.api_tokens.get(token_id)
        if token is None:
            return None
        updated = replace(token, **patch)
        self.api_tokens[token_id] = updated
        return updated

    async def is_admin(self, email: str) -> bool:
        self._enter("is_admin")
        return email in self.admins

    async def insert_admin(self, email: str) -> None:
        self._enter("insert_admin")
        self.admins.add(email)


@dataclass
class SentEmail:
    kind: str
    email: str
    payload: dict[str, Any]


@dataclass
class RecordingEmailSender:
    """IEmailSender that records messages; fail_verification / fail_token raise DeliveryException."""

    sent: list[SentEmail] = field(default_factory=list)
    fail_verification: bool = False
    fail_token: bool = False

    async def send_verification_email(
        self, email: str, name: str, verification_token: str, verification_url: str
    ) -> None:
        if self.fail_verification:
            raise DeliveryException(details={"function": "send-verification-email"})
        self.sent.append(
            SentEmail(
                "verification",
                email,
                {"name": name, "token": verification_token, "url": verification_url},
            )
        )

    async def send_token_email(self, email: str, token: str, expires_at: datetime | None) -> None:
        if self.fail_token:
            raise DeliveryException(details={"function": "send-token-email"})
        self.sent.append(SentEmail("token", email, {"token": token, "expires_at": expires_at}))

    def last(self, kind: str) -> SentEmail:
        return [m for m in self.sent if m.kind == kind][-1]


class FakeIdentityProvider:
    """IIdentityProvider keyed by access token. Set unavailable to simulate provider faults."""

    def __init__(self) -> None:
        self.sessions: dict[str, Identity] = {}
        self.passwords: dict[str, str] = {}
        self.unavailable = False
        self.signed_out: list[str] = []
        self.reset_requests: list[tuple[str, str | None]] = []

    def add_user(self, email: str, access_token: str | None = None, password: str = "correct-horse") -> str:
        token = access_token or f"session-{uuid.uuid4().hex}"
        self.sessions[token] = Identity(user_id=_new_id(), email=email)
        self.passwords[email] = password
        return token

    async def get_user(self, access_token: str) -> Identity | None:
        if self.unavailable:
            raise BackendUnavailableException(details={"operation": "get_user"})
        return self.sessions.get(access_token)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if self.passwords.get(email) != password:
            raise AuthenticationException("Invalid email or password")
        token = next(t for t, i in self.sessions.items() if i.email == email)
        identity = self.sessions[token]
        return AuthSession(
            access_token=token,
            refresh_token="refresh",
            expires_in=3600,
            user_id=identity.user_id,
            email=email,
        )

    async def sign_up(self, email: str, password: str) -> Identity:
        self.add_user(email, password=password)
        return Identity(user_id=_new_id(), email=email)

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self.sessions.pop(access_token, None)

    async def send_password_reset(self, email: str, redirect_to: str | None = None) -> None:
        self.reset_requests.append((email, redirect_to))
