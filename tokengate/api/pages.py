"""HTML page routes: sign-in, application form, token management, and the verification link target."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse

from tokengate.api.v1.dependencies import CurrentIdentity, get_pipeline
from tokengate.application.services import VerificationPipeline
from tokengate.application.services.verification_pipeline import RETRY_LATER_MESSAGE
from tokengate.core.config import get_settings
from tokengate.core.limiter import limit_verify
from tokengate.domain.exceptions import (
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
    ValidationException,
)
from tokengate.pages import (
    render_apply_page,
    render_login_page,
    render_manage_page,
    render_verify_failure,
    render_verify_success,
)
from tokengate.shared.utils.datetime import to_iso

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


@router.get("/login", response_class=HTMLResponse)
def login_page(redirect_to: Annotated[str | None, Query(alias="redirectTo")] = None) -> HTMLResponse:
    return HTMLResponse(render_login_page(get_settings().app_name, redirect_to))


@router.get("/apply", response_class=HTMLResponse)
def apply_page() -> HTMLResponse:
    return HTMLResponse(render_apply_page(get_settings().app_name))


@router.get("/manage", response_class=HTMLResponse)
def manage_page(identity: CurrentIdentity) -> HTMLResponse:
    """Signed-in landing page; the access gate sends anonymous callers to /login first."""
    return HTMLResponse(render_manage_page(get_settings().app_name, identity.email))


@router.get("/verify", response_class=HTMLResponse)
@limit_verify
async def verify_page(
    request: Request,
    pipeline: Annotated[VerificationPipeline, Depends(get_pipeline)],
    token: Annotated[str, Query(max_length=256)] = "",
) -> HTMLResponse:
    """Consume the emailed link and show the issued token (or why it failed)."""
    app_name = get_settings().app_name
    try:
        outcome = await pipeline.verify(token)
    except ValidationException as exc:
        return HTMLResponse(render_verify_failure(app_name, exc.message), status_code=400)
    except (
        BackendUnavailableException,
        BackendAuthorizationException,
        ConstraintViolationException,
    ) as exc:
        logger.warning("Verification page failed: %s", exc)
        return HTMLResponse(render_verify_failure(app_name, RETRY_LATER_MESSAGE), status_code=503)
    token_result = outcome.api_token
    return HTMLResponse(
        render_verify_success(
            app_name,
            token_result.token,
            to_iso(token_result.expires_at) if token_result.expires_at else None,
            outcome.email_delivered,
        ),
        headers={"Cache-Control": "no-store"},
    )
