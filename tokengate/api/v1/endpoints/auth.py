"""Auth endpoints: thin proxies to the Supabase auth provider.

Sign-in stores the access token in an HttpOnly cookie that the access gate
reads on later requests; sign-out revokes the session and clears it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from tokengate.api.v1.dependencies import (
    CurrentIdentity,
    get_identity_provider,
    get_store,
)
from tokengate.application.interfaces.repositories import ICredentialStore
from tokengate.application.interfaces.services import IIdentityProvider
from tokengate.core.config import get_settings
from tokengate.core.limiter import limit_auth, limit_password_reset
from tokengate.middleware.access_gate import extract_access_token
from tokengate.schemas.auth import (
    MeResponse,
    MessageResponse,
    PasswordResetRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)

router = APIRouter()

PASSWORD_RESET_MESSAGE = "If the address has an account, a reset link has been sent."


@router.post("/sign-in", response_model=SessionResponse)
@limit_auth
async def sign_in(
    request: Request,
    response: Response,
    body: SignInRequest,
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> SessionResponse:
    """Password sign-in; 401 on bad credentials."""
    settings = get_settings()
    session = await provider.sign_in(str(body.email), body.password)
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.access_cookie_secure,
        samesite="lax",
        path="/",
    )
    return SessionResponse(
        user_id=session.user_id,
        email=session.email,
        access_token=session.access_token,
        expires_in=session.expires_in,
    )


@router.post("/sign-up", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
@limit_auth
async def sign_up(
    request: Request,
    body: SignUpRequest,
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> MessageResponse:
    await provider.sign_up(str(body.email), body.password)
    return MessageResponse(message="Account created; check your inbox to confirm the address.")


@router.post("/sign-out", response_model=MessageResponse)
async def sign_out(
    request: Request,
    response: Response,
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> MessageResponse:
    """Revoke the current session (if any) and clear the cookie."""
    settings = get_settings()
    token = extract_access_token(request.scope, settings.access_cookie_name)
    if token:
        await provider.sign_out(token)
    response.delete_cookie(settings.access_cookie_name, path="/")
    return MessageResponse(message="Signed out")


@router.post("/password-reset", response_model=MessageResponse)
@limit_password_reset
async def password_reset(
    request: Request,
    body: PasswordResetRequest,
    provider: Annotated[IIdentityProvider, Depends(get_identity_provider)],
) -> MessageResponse:
    """Ask the provider to email a reset link. Same answer whether or not the account exists."""
    await provider.send_password_reset(str(body.email), redirect_to=body.redirect_to)
    return MessageResponse(message=PASSWORD_RESET_MESSAGE)


@router.get("/me", response_model=MeResponse)
async def me(
    identity: CurrentIdentity,
    store: Annotated[ICredentialStore, Depends(get_store)],
) -> MeResponse:
    """Current identity with its admin flag."""
    is_admin = identity.is_admin
    if is_admin is None:
        is_admin = await store.is_admin(identity.email)
    return MeResponse(user_id=identity.user_id, email=identity.email, is_admin=is_admin)
