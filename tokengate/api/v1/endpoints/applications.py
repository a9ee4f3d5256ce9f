"""Application endpoint: redeem an invite code and receive a verification email."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from tokengate.api.v1.dependencies import get_pipeline
from tokengate.application.dtos.verification import ApplicationSubmission
from tokengate.application.services import VerificationPipeline
from tokengate.core.limiter import limit_apply
from tokengate.schemas.application import ApplicationRequest, ApplicationResponse

router = APIRouter()


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_202_ACCEPTED)
@limit_apply
async def submit_application(
    request: Request,
    body: ApplicationRequest,
    pipeline: Annotated[VerificationPipeline, Depends(get_pipeline)],
) -> ApplicationResponse:
    """Validate the invite code and email a one-time verification link.

    400 for an unknown, used or expired code; 502 when the email could not
    be sent (the request stays valid); 503 when the store is unavailable.
    """
    result = await pipeline.apply(
        ApplicationSubmission(
            invite_code=body.invite_code,
            email=str(body.email),
            name=body.name,
            organization=body.organization,
            purpose=body.purpose,
        )
    )
    return ApplicationResponse(state=result.state, email=result.email, expires_at=result.expires_at)
