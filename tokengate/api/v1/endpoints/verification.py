"""Verification endpoint: consume the emailed link and receive the API token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from tokengate.api.v1.dependencies import get_pipeline
from tokengate.application.services import VerificationPipeline
from tokengate.core.limiter import limit_verify
from tokengate.schemas.application import VerificationResponse
from tokengate.schemas.token import ApiTokenResponse

TOKEN_ISSUED_MESSAGE = "Your API token has been issued and emailed to you."
TOKEN_ISSUED_NO_EMAIL_MESSAGE = (
    "Your API token has been issued; the email copy could not be sent, so save it now."
)

router = APIRouter()


@router.get("", response_model=VerificationResponse)
@limit_verify
async def verify_email(
    request: Request,
    token: Annotated[str, Query(min_length=1, max_length=256)],
    pipeline: Annotated[VerificationPipeline, Depends(get_pipeline)],
) -> VerificationResponse:
    """Mark the verification request used, consume the invite code, and issue the token."""
    outcome = await pipeline.verify(token)
    return VerificationResponse(
        state=outcome.state,
        token=ApiTokenResponse.from_result(outcome.api_token),
        email_delivered=outcome.email_delivered,
        message=TOKEN_ISSUED_MESSAGE if outcome.email_delivered else TOKEN_ISSUED_NO_EMAIL_MESSAGE,
    )
