"""DTOs for invite codes (no dependency on the store's wire format)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class InviteCodeResult:
    """Invite code read-model."""

    id: str
    code: str
    created_by: str
    is_used: bool
    created_at: datetime
    expires_at: datetime | None = None
    used_at: datetime | None = None
    used_by: str | None = None
    description: str | None = None

    def is_redeemable(self, now: datetime) -> bool:
        """True when the code is unused and not past its expiry."""
        if self.is_used:
            return False
        return self.expires_at is None or self.expires_at > now

    def consumed_by(self, email: str, used_at: datetime) -> bool:
        """True when this code was marked used by email at exactly used_at."""
        return self.is_used and self.used_by == email and self.used_at == used_at


@dataclass(frozen=True)
class InviteCodeCreate:
    """Fields for a new invite code (provisioning script)."""

    code: str
    created_by: str
    expires_at: datetime | None = None
    description: str | None = None
