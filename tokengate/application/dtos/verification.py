"""DTOs for the verification pipeline (requests, submissions, step results)."""

from dataclasses import dataclass
from datetime import datetime

from tokengate.application.dtos.api_token import ApiTokenResult
from tokengate.domain.enums import PipelineState


@dataclass(frozen=True)
class VerificationRequestResult:
    """Verification request read-model."""

    id: str
    email: str
    token: str
    invite_code_id: str
    is_verified: bool
    created_at: datetime
    expires_at: datetime
    verified_at: datetime | None = None

    def is_pending(self, now: datetime) -> bool:
        """True when the request has not been verified and has not expired."""
        return not self.is_verified and self.expires_at > now


@dataclass(frozen=True)
class VerificationRequestCreate:
    """Fields for a new verification request."""

    email: str
    token: str
    invite_code_id: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class ApplicationSubmission:
    """Application form as submitted by the user (already sanitized)."""

    invite_code: str
    email: str
    name: str
    organization: str | None = None
    purpose: str | None = None


@dataclass(frozen=True, kw_only=True)
class ApplicationResult:
    """Outcome of the apply step. Never carries the verification token."""

    state: PipelineState
    email: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True)
class VerificationOutcome:
    """Outcome of the verify + issue steps."""

    state: PipelineState
    api_token: ApiTokenResult
    email_delivered: bool
