"""Admin dashboard statistics: request counts, token counts, and store aggregates.

Counting and grouping over api_logs is done by the store (exact counts and
named aggregation functions); this service only shapes the rows and
computes shares.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta

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
from tokengate.application.interfaces.repositories import IUsageStatsStore
from tokengate.core.constants import (
    RPC_ACTIVE_USERS,
    RPC_DAILY_ERROR_RATES,
    RPC_DAILY_REQUESTS,
    RPC_ENDPOINT_COUNTS,
    RPC_TOOL_USAGE_COUNTS,
)
from tokengate.domain.enums import StatsRange
from tokengate.shared.telemetry.tracing import traced
from tokengate.shared.utils.datetime import start_of_day, utc_now

logger = logging.getLogger(__name__)

# (label, lower bound inclusive, upper bound exclusive) in seconds
RESPONSE_TIME_BUCKETS: tuple[tuple[str, float, float | None], ...] = (
    ("0-0.2s", 0.0, 0.2),
    ("0.2-0.5s", 0.2, 0.5),
    ("0.5-1s", 0.5, 1.0),
    ("1-2s", 1.0, 2.0),
    ("2s+", 2.0, None),
)


def percentage(count: int, total: int) -> float:
    """Share of total in percent, rounded to one decimal (0 when total is 0)."""
    if not total:
        return 0.0
    return round(count * 100 / total, 1)


class UsageStatsService:
    """Read-only statistics for the admin dashboard."""

    def __init__(self, store: IUsageStatsStore) -> None:
        self.store = store

    async def list_logs(self, limit: int = 10, offset: int = 0) -> list[ApiLogResult]:
        return await self.store.list_api_logs(limit=limit, offset=offset)

    async def usage_stats(self, endpoint_limit: int = 10) -> UsageStats:
        """Totals for all time, today, this week (from Sunday), and this month."""
        now = utc_now()
        today = start_of_day(now)
        # Week starts on Sunday, as on the dashboard.
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        month_start = today.replace(day=1)

        total = await self.store.count_api_logs()
        today_count = await self.store.count_api_logs(since=today)
        week_count = await self.store.count_api_logs(since=week_start)
        month_count = await self.store.count_api_logs(since=month_start)
        rows = await self.store.call_aggregate(
            RPC_ENDPOINT_COUNTS, {"limit_count": endpoint_limit}
        )
        return UsageStats(
            total=total,
            today=today_count,
            this_week=week_count,
            this_month=month_count,
            by_endpoint={row["endpoint"]: int(row["count"]) for row in rows},
        )

    async def token_stats(self) -> TokenStats:
        total = await self.store.count_api_tokens()
        active = await self.store.count_api_tokens(is_active=True)
        revoked = await self.store.count_api_tokens(is_active=False)
        emails = await self.store.list_token_owner_emails()
        return TokenStats(
            total=total,
            active=active,
            revoked=revoked,
            by_user=dict(Counter(e for e in emails if e)),
        )

    async def daily_requests(self, days: int) -> list[DailyCount]:
        rows = await self.store.call_aggregate(RPC_DAILY_REQUESTS, {"days_count": days})
        return [
            DailyCount(date=str(row["request_date"]), count=int(row["request_count"]))
            for row in rows
        ]

    async def error_rates(self, days: int) -> list[DailyRate]:
        rows = await self.store.call_aggregate(RPC_DAILY_ERROR_RATES, {"days_count": days})
        return [
            DailyRate(date=str(row["error_date"]), rate=float(row["error_rate"]))
            for row in rows
        ]

    async def tool_usage(self, limit: int = 5) -> list[ShareItem]:
        total = await self.store.count_api_logs()
        rows = await self.store.call_aggregate(RPC_TOOL_USAGE_COUNTS, {"limit_count": limit})
        return [
            ShareItem(
                label=row["tool_name"],
                count=int(row["count"]),
                percentage=percentage(int(row["count"]), total),
            )
            for row in rows
        ]

    async def response_time_distribution(self) -> list[ShareItem]:
        total = await self.store.count_api_logs(with_response_time=True)
        items: list[ShareItem] = []
        for label, low, high in RESPONSE_TIME_BUCKETS:
            count = await self.store.count_api_logs(
                with_response_time=True,
                response_time_min=low,
                response_time_max=high,
            )
            items.append(
                ShareItem(label=label, count=count, percentage=percentage(count, total))
            )
        return items

    async def active_users(self, limit: int = 5) -> list[ActiveUser]:
        rows = await self.store.call_aggregate(RPC_ACTIVE_USERS, {"limit_count": limit})
        users = []
        for row in rows:
            email = row.get("user_email") or "unknown"
            users.append(
                ActiveUser(
                    token_id=str(row["token_id"]),
                    name=email.split("@", 1)[0] or "unknown",
                    email=email,
                    request_count=int(row["request_count"]),
                    last_active=row.get("last_active"),
                )
            )
        return users

    @traced("stats.overview")
    async def overview(self) -> DashboardOverview:
        """Dashboard landing numbers: usage, tokens, and the five most active users."""
        return DashboardOverview(
            usage=await self.usage_stats(),
            tokens=await self.token_stats(),
            active_users=await self.active_users(limit=5),
        )

    @traced("stats.detail")
    async def detail(self, range: StatsRange = StatsRange.WEEK) -> DetailedStats:
        """Statistics page for a time window."""
        days = range.days
        return DetailedStats(
            days=days,
            daily_requests=await self.daily_requests(days),
            tool_usage=await self.tool_usage(limit=5),
            response_time_distribution=await self.response_time_distribution(),
            error_rates=await self.error_rates(days),
            active_users=await self.active_users(limit=5),
        )
