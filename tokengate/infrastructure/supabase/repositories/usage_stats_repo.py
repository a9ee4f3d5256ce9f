"""Supabase-backed usage statistics store (implements IUsageStatsStore)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from tokengate.application.dtos.stats import ApiLogResult
from tokengate.core.constants import TABLE_API_LOGS, TABLE_API_TOKENS
from tokengate.infrastructure.supabase._rest_client import SupabaseRESTClient
from tokengate.shared.utils.datetime import parse_timestamp, utc_now

# api_logs embeds the owning token's email through the token_id foreign key
_LOG_COLUMNS = f"*,{TABLE_API_TOKENS}(user_email)"


def _api_log(row: dict[str, Any]) -> ApiLogResult:
    owner = row.get(TABLE_API_TOKENS) or {}
    response_time = row.get("response_time")
    return ApiLogResult(
        id=str(row["id"]),
        token_id=str(row.get("token_id") or ""),
        endpoint=row.get("endpoint") or "",
        request_time=parse_timestamp(row.get("request_time")) or utc_now(),
        tool_name=row.get("tool_name"),
        ip_address=row.get("ip_address"),
        user_agent=row.get("user_agent"),
        response_time=float(response_time) if response_time is not None else None,
        status=row.get("status"),
        error_message=row.get("error_message"),
        user_email=owner.get("user_email") if isinstance(owner, dict) else None,
    )


class SupabaseUsageStatsStore:
    """Read-only access to api_logs, token counts, and aggregation RPCs."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self._client = client

    async def list_api_logs(self, limit: int, offset: int) -> list[ApiLogResult]:
        rows = await (
            self._client.table(TABLE_API_LOGS)
            .select(_LOG_COLUMNS)
            .order("request_time", descending=True)
            .limit(limit)
            .offset(offset)
            .execute()
        )
        return [_api_log(row) for row in rows]

    async def count_api_logs(
        self,
        since: datetime | None = None,
        response_time_min: float | None = None,
        response_time_max: float | None = None,
        with_response_time: bool = False,
    ) -> int:
        query = self._client.table(TABLE_API_LOGS).select("id")
        if since is not None:
            query = query.gte("request_time", since)
        if with_response_time:
            query = query.not_is("response_time", None)
        if response_time_min is not None:
            query = query.gte("response_time", response_time_min)
        if response_time_max is not None:
            query = query.lt("response_time", response_time_max)
        return await query.count()

    async def count_api_tokens(self, is_active: bool | None = None) -> int:
        query = self._client.table(TABLE_API_TOKENS).select("id")
        if is_active is not None:
            query = query.is_("is_active", is_active)
        return await query.count()

    async def list_token_owner_emails(self) -> list[str]:
        rows = await self._client.table(TABLE_API_TOKENS).select("user_email").execute()
        return [row.get("user_email") or "" for row in rows]

    async def call_aggregate(self, name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        return await self._client.rpc(name, params)
