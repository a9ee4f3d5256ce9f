"""Admin dashboard schemas (API logs and usage statistics).

Built from the application DTOs with from_attributes.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class _FromDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ApiLogResponse(_FromDTO):
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


class ApiLogListResponse(BaseModel):
    items: list[ApiLogResponse]
    limit: int
    offset: int


class UsageStatsResponse(_FromDTO):
    total: int
    today: int
    this_week: int
    this_month: int
    by_endpoint: dict[str, int]


class TokenStatsResponse(_FromDTO):
    total: int
    active: int
    revoked: int
    by_user: dict[str, int]


class DailyCountResponse(_FromDTO):
    date: str
    count: int


class DailyRateResponse(_FromDTO):
    date: str
    rate: float


class ShareItemResponse(_FromDTO):
    label: str
    count: int
    percentage: float


class ActiveUserResponse(_FromDTO):
    token_id: str
    name: str
    email: str
    request_count: int
    last_active: str | None = None


class OverviewResponse(_FromDTO):
    """GET /admin/stats/overview."""

    usage: UsageStatsResponse
    tokens: TokenStatsResponse
    active_users: list[ActiveUserResponse]


class DetailResponse(_FromDTO):
    """GET /admin/stats/detail."""

    days: int
    daily_requests: list[DailyCountResponse]
    tool_usage: list[ShareItemResponse]
    response_time_distribution: list[ShareItemResponse]
    error_rates: list[DailyRateResponse]
    active_users: list[ActiveUserResponse]
