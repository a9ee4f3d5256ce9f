"""DTOs for API tokens."""

from dataclasses import dataclass
from datetime import datetime

from tokengate.domain.enums import TokenStatus


@dataclass(frozen=True)
class ApiTokenResult:
    """API token read-model."""

    id: str
    token: str
    user_email: str
    created_at: datetime
    is_active: bool
    invite_code_id: str | None = None
    expires_at: datetime | None = None

    def status_at(self, now: datetime) -> TokenStatus:
        """Derived status: revoked wins over expired."""
        if not self.is_active:
            return TokenStatus.REVOKED
        if self.expires_at is not None and self.expires_at <= now:
            return TokenStatus.EXPIRED
        return TokenStatus.ACTIVE

    @property
    def user_name(self) -> str:
        """Local part of the owner email (the admin console's display name)."""
        return self.user_email.split("@", 1)[0]


@dataclass(frozen=True)
class ApiTokenCreate:
    """Fields for a new API token. id is optional; the store assigns one when None."""

    token: str
    user_email: str
    expires_at: datetime | None
    invite_code_id: str | None = None
    id: str | None = None
    is_active: bool = True


@dataclass(frozen=True, kw_only=True)
class TokenFilter:
    """Filters for listing tokens. owner_email is exact; the *_contains filters are case-insensitive."""

    owner_email: str | None = None
    status: TokenStatus | None = None
    email_contains: str | None = None
    name_contains: str | None = None
