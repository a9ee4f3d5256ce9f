"""Admin token console: list all tokens, issue manually, revoke any token."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from tokengate.api.v1.dependencies import AdminIdentity, get_token_manager
from tokengate.application.dtos.api_token import TokenFilter
from tokengate.application.services import TokenLifecycleManager
from tokengate.core.limiter import limit_admin_writes
from tokengate.domain.enums import TokenStatus
from tokengate.schemas.token import (
    ApiTokenListResponse,
    ApiTokenResponse,
    TokenCreateRequest,
)
from tokengate.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tokens", response_model=ApiTokenListResponse)
async def list_tokens(
    admin: AdminIdentity,
    manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
    status_filter: Annotated[TokenStatus | None, Query(alias="status")] = None,
    email: Annotated[str | None, Query(max_length=254)] = None,
    user_name: Annotated[str | None, Query(max_length=100)] = None,
) -> ApiTokenListResponse:
    """All tokens, newest first; filter by status and email / user-name substring."""
    tokens = await manager.list(
        TokenFilter(status=status_filter, email_contains=email, name_contains=user_name)
    )
    now = utc_now()
    return ApiTokenListResponse(
        items=[ApiTokenResponse.from_result(t, now) for t in tokens],
        total=len(tokens),
    )


@router.post("/tokens", response_model=ApiTokenResponse, status_code=status.HTTP_201_CREATED)
@limit_admin_writes
async def create_token(
    request: Request,
    body: TokenCreateRequest,
    admin: AdminIdentity,
    manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
) -> ApiTokenResponse:
    """Issue a token for an email without an invite code."""
    token = await manager.issue(email=str(body.email), validity_days=body.expires_in_days)
    logger.info("Admin %s issued token %s", admin.user_id, token.id)
    return ApiTokenResponse.from_result(token)


@router.post("/tokens/{token_id}/revoke", response_model=ApiTokenResponse)
@limit_admin_writes
async def revoke_token(
    request: Request,
    token_id: UUID,
    admin: AdminIdentity,
    manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
) -> ApiTokenResponse:
    token = await manager.revoke(str(token_id))
    logger.info("Admin %s revoked token %s", admin.user_id, token.id)
    return ApiTokenResponse.from_result(token)
