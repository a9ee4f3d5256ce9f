"""Application DTOs: frozen read-models and command objects passed between layers."""

from tokengate.application.dtos.api_token import ApiTokenCreate, ApiTokenResult, TokenFilter
from tokengate.application.dtos.identity import AuthSession, Identity
from tokengate.application.dtos.invite_code import InviteCodeCreate, InviteCodeResult
from tokengate.application.dtos.stats import (
    ActiveUser,
    ApiLogResult,
    DailyCount,
    DailyRate,
    DashboardOverview,
    DetailedStats,
    ShareItem,
    TokenStats,
    UsageStats,
)
from tokengate.application.dtos.verification import (
    ApplicationResult,
    ApplicationSubmission,
    VerificationOutcome,
    VerificationRequestCreate,
    VerificationRequestResult,
)

__all__ = [
    "ActiveUser",
    "ApiLogResult",
    "ApiTokenCreate",
    "ApiTokenResult",
    "ApplicationResult",
    "ApplicationSubmission",
    "AuthSession",
    "DailyCount",
    "DailyRate",
    "DashboardOverview",
    "DetailedStats",
    "Identity",
    "InviteCodeCreate",
    "InviteCodeResult",
    "ShareItem",
    "TokenFilter",
    "TokenStats",
    "UsageStats",
    "VerificationOutcome",
    "VerificationRequestCreate",
    "VerificationRequestResult",
]
