"""Application (invite code redemption) and verification API schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from tokengate.domain.enums import PipelineState
from tokengate.schemas.token import ApiTokenResponse
from tokengate.shared.utils.sanitization import (
    normalize_email,
    sanitize_text,
    validate_invite_code,
)


class ApplicationRequest(BaseModel):
    """Request body for POST /applications (the public application form)."""

    invite_code: str = Field(..., min_length=1, max_length=64, description="Invitation code")
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=100)
    organization: str | None = Field(default=None, max_length=200)
    purpose: str = Field(..., min_length=1, max_length=1000, description="Intended use of the API")
    agree_terms: bool = Field(..., description="Applicant accepted the terms of use")

    @field_validator("invite_code")
    @classmethod
    def check_invite_code(cls, v: str) -> str:
        return validate_invite_code(v)

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("name", "organization", "purpose", mode="after")
    @classmethod
    def strip_markup(cls, v: str | None) -> str | None:
        cleaned = sanitize_text(v, max_length=1000)
        if v is not None and not cleaned:
            raise ValueError("must contain text")
        return cleaned

    @field_validator("agree_terms")
    @classmethod
    def terms_accepted(cls, v: bool) -> bool:
        if not v:
            raise ValueError("terms of use must be accepted")
        return v


class ApplicationResponse(BaseModel):
    """Response for POST /applications. Never includes the verification token."""

    state: PipelineState
    email: str
    expires_at: datetime
    message: str = "Verification email sent; follow the link to receive your API token."


class VerificationResponse(BaseModel):
    """Response for GET /verify: the issued API token."""

    state: PipelineState
    token: ApiTokenResponse
    email_delivered: bool
    message: str
