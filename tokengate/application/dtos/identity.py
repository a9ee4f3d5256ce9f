"""DTOs for identities resolved by the auth provider."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Verified identity for one request.

    Resolved once by the access gate and passed explicitly to route
    dependencies. is_admin is None when the admin lookup was not performed
    or failed.
    """

    user_id: str
    email: str
    is_admin: bool | None = None


@dataclass(frozen=True)
class AuthSession:
    """Session returned by a successful sign-in."""

    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user_id: str
    email: str
