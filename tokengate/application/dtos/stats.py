"""DTOs for the admin dashboard (usage logs and aggregate statistics)."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, kw_only=True)
class ApiLogResult:
    """One API call made with an issued token, joined with the token owner."""

    id: str
    token_id: str
    endpoint: str
    request_time: datetime
    tool_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    response_time: float | None = None
    status: str | None = None
    error_message: str | None = None
    user_email: str | None = None


@dataclass(frozen=True, kw_only=True)
class UsageStats:
    total: int
    today: int
    this_week: int
    this_month: int
    by_endpoint: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class TokenStats:
    total: int
    active: int
    revoked: int
    by_user: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True, kw_only=True)
class DailyRate:
    date: str
    rate: float


@dataclass(frozen=True, kw_only=True)
class ShareItem:
    """A labelled count with its share of the total, in percent to one decimal."""

    label: str
    count: int
    percentage: float


@dataclass(frozen=True, kw_only=True)
class ActiveUser:
    token_id: str
    name: str
    email: str
    request_count: int
    last_active: str | None = None


@dataclass(frozen=True, kw_only=True)
class DashboardOverview:
    usage: UsageStats
    tokens: TokenStats
    active_users: list[ActiveUser]


@dataclass(frozen=True, kw_only=True)
class DetailedStats:
    days: int
    daily_requests: list[DailyCount]
    tool_usage: list[ShareItem]
    response_time_distribution: list[ShareItem]
    error_rates: list[DailyRate]
    active_users: list[ActiveUser]
