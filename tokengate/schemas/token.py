"""API token schemas (self-service and admin console)."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from tokengate.application.dtos.api_token import ApiTokenResult
from tokengate.domain.enums import TokenStatus
from tokengate.shared.utils.datetime import utc_now
from tokengate.shared.utils.sanitization import normalize_email


class ApiTokenResponse(BaseModel):
    """API token with its derived status."""

    id: str
    token: str
    user_email: str
    user_name: str
    status: TokenStatus
    is_active: bool
    created_at: datetime
    expires_at: datetime | None = None
    invite_code_id: str | None = None

    @classmethod
    def from_result(cls, result: ApiTokenResult, now: datetime | None = None) -> "ApiTokenResponse":
        return cls(
            id=result.id,
            token=result.token,
            user_email=result.user_email,
            user_name=result.user_name,
            status=result.status_at(now or utc_now()),
            is_active=result.is_active,
            created_at=result.created_at,
            expires_at=result.expires_at,
            invite_code_id=result.invite_code_id,
        )


class ApiTokenListResponse(BaseModel):
    items: list[ApiTokenResponse]
    total: int


class TokenCreateRequest(BaseModel):
    """Request body for POST /admin/tokens (manual issuance)."""

    email: EmailStr
    expires_in_days: int = Field(default=365, ge=1, le=3650)

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)
