"""Admin API-log browser."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from tokengate.api.v1.dependencies import AdminIdentity, get_stats_service
from tokengate.application.services import UsageStatsService
from tokengate.schemas.admin import ApiLogListResponse, ApiLogResponse

router = APIRouter()


@router.get("/logs", response_model=ApiLogListResponse)
async def list_logs(
    admin: AdminIdentity,
    service: Annotated[UsageStatsService, Depends(get_stats_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> ApiLogListResponse:
    """API calls made with issued tokens, newest first."""
    logs = await service.list_logs(limit=limit, offset=offset)
    return ApiLogListResponse(
        items=[ApiLogResponse.model_validate(log) for log in logs],
        limit=limit,
        offset=offset,
    )
