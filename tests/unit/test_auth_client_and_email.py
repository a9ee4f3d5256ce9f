"""GoTrue client and edge-function email sender against mocked HTTP (httpx.MockTransport)."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from tokengate.domain.exceptions import (
    AuthenticationException,
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
    DeliveryException,
    ValidationException,
)
from tokengate.infrastructure.external.email import EdgeFunctionEmailSender
from tokengate.infrastructure.supabase import SupabaseAuthClient

BASE_URL = "https://test-project.supabase.co"


def _http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _auth(handler, service_key: str | None = None) -> SupabaseAuthClient:
    return SupabaseAuthClient(BASE_URL, "anon", service_key=service_key, http_client=_http(handler))


def _reply(status: int, body=None, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body if body is not None else {})

    return handler


async def test_get_user_sends_bearer_and_returns_identity() -> None:
    seen: list[httpx.Request] = []
    client = _auth(_reply(200, {"id": "u-1", "email": "a@x.io"}, seen))

    identity = await client.get_user("session-token")

    assert (identity.user_id, identity.email) == ("u-1", "a@x.io")
    assert seen[0].url.path == "/auth/v1/user"
    assert seen[0].headers["authorization"] == "Bearer session-token"
    assert seen[0].headers["apikey"] == "anon"


async def test_get_user_email_is_lowercased() -> None:
    identity = await _auth(_reply(200, {"id": "u-1", "email": "Ada@Example.com"})).get_user("t")
    assert identity.email == "ada@example.com"


@pytest.mark.parametrize("status", [401, 403, 404])
async def test_get_user_invalid_session_is_none(status: int) -> None:
    assert await _auth(_reply(status)).get_user("expired") is None


async def test_get_user_empty_token_skips_request() -> None:
    seen: list[httpx.Request] = []
    assert await _auth(_reply(200, {}, seen)).get_user("") is None
    assert seen == []


async def test_get_user_provider_fault_is_unavailable() -> None:
    with pytest.raises(BackendUnavailableException):
        await _auth(_reply(502)).get_user("t")


async def test_sign_in_uses_password_grant() -> None:
    seen: list[httpx.Request] = []
    body = {
        "access_token": "at",
        "refresh_token": "rt",
        "expires_in": 3600,
        "user": {"id": "u-1", "email": "a@x.io"},
    }

    session = await _auth(_reply(200, body, seen)).sign_in("a@x.io", "pw")

    assert session.access_token == "at"
    assert session.user_id == "u-1"
    assert seen[0].url.params["grant_type"] == "password"
    assert json.loads(seen[0].content) == {"email": "a@x.io", "password": "pw"}


@pytest.mark.parametrize("status", [400, 401, 422])
async def test_sign_in_bad_credentials(status: int) -> None:
    with pytest.raises(AuthenticationException):
        await _auth(_reply(status, {"error_description": "Invalid login credentials"})).sign_in("a@x.io", "bad")


async def test_sign_up_accepts_wrapped_user() -> None:
    identity = await _auth(_reply(200, {"user": {"id": "u-2", "email": "b@x.io"}})).sign_up("b@x.io", "longpassword")
    assert identity.user_id == "u-2"


async def test_sign_up_weak_password_is_validation_error() -> None:
    with pytest.raises(ValidationException) as exc_info:
        await _auth(_reply(422, {"msg": "Password should be at least 8 characters"})).sign_up("b@x.io", "x")
    assert "8 characters" in exc_info.value.message


async def test_sign_out_ignores_invalid_session() -> None:
    await _auth(_reply(401)).sign_out("gone")


async def test_password_reset_passes_redirect() -> None:
    seen: list[httpx.Request] = []
    await _auth(_reply(200, {}, seen)).send_password_reset("a@x.io", "https://tokens.example.com/login")
    assert seen[0].url.path == "/auth/v1/recover"
    assert seen[0].url.params["redirect_to"] == "https://tokens.example.com/login"


async def test_create_user_requires_service_key() -> None:
    with pytest.raises(BackendAuthorizationException):
        await _auth(_reply(200)).create_user("a@x.io", "pw")


async def test_create_user_existing_is_constraint_violation() -> None:
    client = _auth(_reply(422, {"msg": "User already registered"}), service_key="service")
    with pytest.raises(ConstraintViolationException):
        await client.create_user("a@x.io", "pw")


async def test_create_user_uses_service_key() -> None:
    seen: list[httpx.Request] = []
    client = _auth(_reply(200, {"id": "u-3", "email": "a@x.io"}, seen), service_key="service")

    await client.create_user("a@x.io", "pw")

    assert seen[0].url.path == "/auth/v1/admin/users"
    assert seen[0].headers["authorization"] == "Bearer service"
    assert json.loads(seen[0].content)["email_confirm"] is True


async def test_verification_email_payload() -> None:
    seen: list[httpx.Request] = []
    sender = EdgeFunctionEmailSender(BASE_URL, "anon", http_client=_http(_reply(200, {}, seen)))

    await sender.send_verification_email("a@x.io", "Ada", "tok", "https://t.example/verify?token=tok")

    assert seen[0].url.path == "/functions/v1/send-verification-email"
    assert json.loads(seen[0].content) == {
        "email": "a@x.io",
        "name": "Ada",
        "verificationToken": "tok",
        "verificationUrl": "https://t.example/verify?token=tok",
    }


async def test_token_email_payload() -> None:
    seen: list[httpx.Request] = []
    sender = EdgeFunctionEmailSender(BASE_URL, "anon", http_client=_http(_reply(200, {}, seen)))

    await sender.send_token_email("a@x.io", "secret", datetime(2026, 1, 1, tzinfo=UTC))

    assert seen[0].url.path == "/functions/v1/send-token-email"
    assert json.loads(seen[0].content)["expiresAt"] == "2026-01-01T00:00:00+00:00"


@pytest.mark.parametrize("status", [400, 500])
async def test_email_non_2xx_is_delivery_error(status: int) -> None:
    sender = EdgeFunctionEmailSender(BASE_URL, "anon", http_client=_http(_reply(status)))
    with pytest.raises(DeliveryException):
        await sender.send_token_email("a@x.io", "secret", None)


async def test_email_transport_error_is_delivery_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    sender = EdgeFunctionEmailSender(BASE_URL, "anon", http_client=_http(handler))
    with pytest.raises(DeliveryException):
        await sender.send_verification_email("a@x.io", "Ada", "tok", "https://t.example/verify")
