"""Pydantic request/response schemas for the API."""

from tokengate.schemas.admin import (
    ApiLogListResponse,
    ApiLogResponse,
    DetailResponse,
    OverviewResponse,
)
from tokengate.schemas.application import (
    ApplicationRequest,
    ApplicationResponse,
    VerificationResponse,
)
from tokengate.schemas.auth import (
    MeResponse,
    MessageResponse,
    PasswordResetRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from tokengate.schemas.health import HealthResponse, ReadinessResponse
from tokengate.schemas.token import (
    ApiTokenListResponse,
    ApiTokenResponse,
    TokenCreateRequest,
)

__all__ = [
    "ApiLogListResponse",
    "ApiLogResponse",
    "ApiTokenListResponse",
    "ApiTokenResponse",
    "ApplicationRequest",
    "ApplicationResponse",
    "DetailResponse",
    "HealthResponse",
    "MeResponse",
    "MessageResponse",
    "OverviewResponse",
    "PasswordResetRequest",
    "ReadinessResponse",
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
    "TokenCreateRequest",
    "VerificationResponse",
]
