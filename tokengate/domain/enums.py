"""Domain enumerations for the token service.

Enums represent fixed sets of domain values (token status, pipeline state).
"""

from enum import Enum


class TokenStatus(str, Enum):
    """Derived status of an API token.

    A revoked token stays revoked; an active token past its expiry reads as expired.
    """

    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class PipelineState(str, Enum):
    """States of one (email, invite code) attempt through the verification pipeline."""

    SUBMITTED = "submitted"
    CODE_VALIDATED = "code_validated"
    REQUEST_CREATED = "request_created"
    EMAIL_SENT = "email_sent"
    VERIFIED = "verified"
    TOKEN_ISSUED = "token_issued"

    # Terminal failures
    CODE_INVALID = "code_invalid"
    REQUEST_FAILED = "request_failed"
    EMAIL_FAILED = "email_failed"
    TOKEN_FAILED = "token_failed"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_STATES


_FAILURE_STATES = frozenset(
    {
        PipelineState.CODE_INVALID,
        PipelineState.REQUEST_FAILED,
        PipelineState.EMAIL_FAILED,
        PipelineState.TOKEN_FAILED,
    }
)


class StatsRange(str, Enum):
    """Time window for the admin statistics view."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {"day": 1, "week": 7, "month": 30, "year": 365}[self.value]
