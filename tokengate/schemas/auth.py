"""Auth API schemas (proxied to the Supabase auth provider)."""

from pydantic import BaseModel, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class PasswordResetRequest(BaseModel):
    email: EmailStr
    redirect_to: str | None = Field(default=None, description="Where the reset link should land")


class SessionResponse(BaseModel):
    """Returned by sign-in; the access token is also set as an HttpOnly cookie."""

    user_id: str
    email: str
    access_token: str
    expires_in: int | None = None
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user_id: str
    email: str
    is_admin: bool


class MessageResponse(BaseModel):
    message: str
