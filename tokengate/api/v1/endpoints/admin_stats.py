"""Admin usage statistics (dashboard overview and the detailed statistics view)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from tokengate.api.v1.dependencies import AdminIdentity, get_stats_service
from tokengate.application.services import UsageStatsService
from tokengate.domain.enums import StatsRange
from tokengate.schemas.admin import DetailResponse, OverviewResponse

router = APIRouter()


@router.get("/stats/overview", response_model=OverviewResponse)
async def stats_overview(
    admin: AdminIdentity,
    service: Annotated[UsageStatsService, Depends(get_stats_service)],
) -> OverviewResponse:
    return OverviewResponse.model_validate(await service.overview())


@router.get("/stats/detail", response_model=DetailResponse)
async def stats_detail(
    admin: AdminIdentity,
    service: Annotated[UsageStatsService, Depends(get_stats_service)],
    range_: Annotated[StatsRange, Query(alias="range")] = StatsRange.WEEK,
) -> DetailResponse:
    """Daily requests, tool usage, response times, error rates and active users for a window."""
    return DetailResponse.model_validate(await service.detail(range_))
