"""Token lifecycle: issue, revoke, and list API tokens.

Shared by the verification pipeline, the self-service /manage surface and
the admin console. No caching: every call round-trips to the store.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from tokengate.application.dtos.api_token import ApiTokenCreate, ApiTokenResult, TokenFilter
from tokengate.application.interfaces.repositories import ICredentialStore
from tokengate.domain.enums import TokenStatus
from tokengate.domain.exceptions import ResourceNotFoundException, ValidationException
from tokengate.shared.telemetry.tracing import traced
from tokengate.shared.utils.datetime import utc_now
from tokengate.shared.utils.generators import generate_secret_token
from tokengate.shared.utils.sanitization import normalize_email

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY_DAYS = 365
MAX_VALIDITY_DAYS = 3650


class TokenLifecycleManager:
    """Create, revoke and list issued API tokens."""

    def __init__(
        self,
        store: ICredentialStore,
        default_validity_days: int = DEFAULT_VALIDITY_DAYS,
    ) -> None:
        self.store = store
        self.default_validity_days = default_validity_days

    @traced("tokens.issue")
    async def issue(
        self,
        email: str,
        invite_code_id: str | None = None,
        validity_days: int | None = None,
        token_id: str | None = None,
    ) -> ApiTokenResult:
        """Mint and persist a new active token for email.

        The secret comes from the OS CSPRNG and is never reused. token_id
        pins the row ID (the pipeline derives it from the verification
        request so replays collide); when None the store assigns one.
        """
        days = self.default_validity_days if validity_days is None else validity_days
        if days <= 0 or days > MAX_VALIDITY_DAYS:
            raise ValidationException(
                f"Validity must be between 1 and {MAX_VALIDITY_DAYS} days",
                field="validity_days",
            )
        created = await self.store.insert_api_token(
            ApiTokenCreate(
                id=token_id,
                token=generate_secret_token(),
                user_email=normalize_email(email),
                invite_code_id=invite_code_id,
                expires_at=utc_now() + timedelta(days=days),
                is_active=True,
            )
        )
        logger.info("Issued API token %s (valid %d days)", created.id, days)
        return created

    @traced("tokens.revoke")
    async def revoke(
        self, token_id: str, owner_email: str | None = None
    ) -> ApiTokenResult:
        """Deactivate a token. Idempotent: an already revoked token is returned unchanged.

        When owner_email is given (self-service), a token owned by someone
        else is reported as not found. Owners compare case-insensitively.
        """
        token = await self.store.get_api_token(token_id)
        if token is None or (
            owner_email is not None
            and normalize_email(token.user_email) != normalize_email(owner_email)
        ):
            raise ResourceNotFoundException("api_token", token_id)
        if not token.is_active:
            return token
        updated = await self.store.update_api_token(token_id, {"is_active": False})
        if updated is None:
            raise ResourceNotFoundException("api_token", token_id)
        logger.info("Revoked API token %s", token_id)
        return updated

    async def list(self, token_filter: TokenFilter | None = None) -> list[ApiTokenResult]:
        """Return tokens matching the filter, newest first. Pure read."""
        f = token_filter or TokenFilter()
        is_active: bool | None = None
        if f.status is TokenStatus.REVOKED:
            is_active = False
        elif f.status in (TokenStatus.ACTIVE, TokenStatus.EXPIRED):
            is_active = True

        if f.owner_email is not None:
            tokens = await self.store.list_api_tokens_for_email(normalize_email(f.owner_email))
            if is_active is not None:
                tokens = [t for t in tokens if t.is_active == is_active]
        else:
            tokens = await self.store.list_api_tokens(is_active=is_active)

        now = utc_now()
        if f.status is not None:
            tokens = [t for t in tokens if t.status_at(now) is f.status]
        if f.email_contains:
            needle = f.email_contains.lower()
            tokens = [t for t in tokens if needle in t.user_email.lower()]
        if f.name_contains:
            needle = f.name_contains.lower()
            tokens = [t for t in tokens if needle in t.user_name.lower()]
        return tokens
