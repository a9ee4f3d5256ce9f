"""Self-service token management: the signed-in user's own tokens."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from tokengate.api.v1.dependencies import CurrentIdentity, get_token_manager
from tokengate.application.dtos.api_token import TokenFilter
from tokengate.application.services import TokenLifecycleManager
from tokengate.schemas.token import ApiTokenListResponse, ApiTokenResponse
from tokengate.shared.utils.datetime import utc_now

router = APIRouter()


@router.get("/tokens", response_model=ApiTokenListResponse)
async def list_my_tokens(
    identity: CurrentIdentity,
    manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
) -> ApiTokenListResponse:
    """Tokens owned by the signed-in user, newest first."""
    tokens = await manager.list(TokenFilter(owner_email=identity.email))
    now = utc_now()
    return ApiTokenListResponse(
        items=[ApiTokenResponse.from_result(t, now) for t in tokens],
        total=len(tokens),
    )


@router.post("/tokens/{token_id}/revoke", response_model=ApiTokenResponse)
async def revoke_my_token(
    token_id: UUID,
    identity: CurrentIdentity,
    manager: Annotated[TokenLifecycleManager, Depends(get_token_manager)],
) -> ApiTokenResponse:
    """Revoke one of the caller's tokens; another user's token is reported as not found."""
    token = await manager.revoke(str(token_id), owner_email=identity.email)
    return ApiTokenResponse.from_result(token)
