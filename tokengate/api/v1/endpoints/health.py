"""Health check endpoints. No collaborator calls; used for liveness and readiness checks."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from tokengate.core.config import get_settings
from tokengate.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Supabase collaborators not wired", "model": ReadinessResponse}},
)
def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """200 when the store, auth and email collaborators were created at startup."""
    state = request.app.state
    configured = all(
        getattr(state, name, None) is not None
        for name in ("credential_store", "identity_provider", "email_sender")
    )
    if configured:
        return ReadinessResponse(store_configured=True)
    return JSONResponse(
        status_code=503,
        content=ReadinessResponse(status="not_ready", store_configured=False).model_dump(),
    )
