"""Supabase REST client and credential store against a mocked PostgREST (httpx.MockTransport)."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from tokengate.application.dtos.api_token import ApiTokenCreate
from tokengate.domain.exceptions import (
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
)
from tokengate.infrastructure.supabase import SupabaseRESTClient
from tokengate.infrastructure.supabase._rest_client import _parse_content_range_total
from tokengate.infrastructure.supabase.repositories import (
    SupabaseCredentialStore,
    SupabaseUsageStatsStore,
)

BASE_URL = "https://test-project.supabase.co"

INVITE_ROW = {
    "id": "inv-1",
    "code": "WELCOME2025",
    "created_by": "admin@example.com",
    "is_used": False,
    "created_at": "2025-01-01T00:00:00+00:00",
    "expires_at": None,
}


class Recorder:
    """Handler for MockTransport that records requests and replies from a queue."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(recorder: Recorder) -> SupabaseRESTClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return SupabaseRESTClient(BASE_URL, "service-key", http_client=http)


def test_parse_content_range_total() -> None:
    assert _parse_content_range_total("0-9/42") == 42
    assert _parse_content_range_total("*/0") == 0
    assert _parse_content_range_total("0-9/*") == 0
    assert _parse_content_range_total(None) == 0


async def test_find_invite_code_filters_unused_on_server() -> None:
    recorder = Recorder(httpx.Response(200, json=[INVITE_ROW]))
    store = SupabaseCredentialStore(_client(recorder))

    invite = await store.find_invite_code_by_code("WELCOME2025")

    assert invite.id == "inv-1"
    assert invite.is_used is False
    request = recorder.last
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/invite_codes"
    assert request.url.params["code"] == "eq.WELCOME2025"
    assert request.url.params["is_used"] == "is.false"
    assert request.url.params["limit"] == "1"
    assert request.headers["apikey"] == "service-key"
    assert request.headers["authorization"] == "Bearer service-key"


async def test_find_invite_code_returns_none_when_no_rows() -> None:
    store = SupabaseCredentialStore(_client(Recorder(httpx.Response(200, json=[]))))
    assert await store.find_invite_code_by_code("NOPE") is None


async def test_mark_invite_code_used_is_conditional_patch() -> None:
    """The update carries is_used=is.false so only one caller can consume the code."""
    recorder = Recorder(httpx.Response(200, json=[{**INVITE_ROW, "is_used": True, "used_by": "a@x.io"}]))
    store = SupabaseCredentialStore(_client(recorder))
    used_at = datetime(2025, 2, 1, tzinfo=UTC)

    invite = await store.mark_invite_code_used("inv-1", "a@x.io", used_at)

    assert invite.is_used is True
    request = recorder.last
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.inv-1"
    assert request.url.params["is_used"] == "is.false"
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == {
        "is_used": True,
        "used_by": "a@x.io",
        "used_at": "2025-02-01T00:00:00+00:00",
    }


async def test_mark_invite_code_used_returns_none_when_already_consumed() -> None:
    store = SupabaseCredentialStore(_client(Recorder(httpx.Response(200, json=[]))))
    assert await store.mark_invite_code_used("inv-1", "a@x.io", datetime.now(UTC)) is None


async def test_get_invite_code_reads_used_codes_too() -> None:
    """Lookup by ID has no is_used filter; the stored used_at matches the claim time exactly."""
    used_at = datetime(2025, 2, 1, 12, 30, 5, 123456, tzinfo=UTC)
    row = {**INVITE_ROW, "is_used": True, "used_by": "a@x.io", "used_at": "2025-02-01T12:30:05.123456Z"}
    recorder = Recorder(httpx.Response(200, json=[row]))
    store = SupabaseCredentialStore(_client(recorder))

    invite = await store.get_invite_code("inv-1")

    assert recorder.last.url.params["id"] == "eq.inv-1"
    assert "is_used" not in recorder.last.url.params
    assert invite.consumed_by("a@x.io", used_at)
    assert not invite.consumed_by("b@x.io", used_at)


async def test_mark_verification_verified_is_conditional_patch() -> None:
    recorder = Recorder(httpx.Response(200, json=[]))
    store = SupabaseCredentialStore(_client(recorder))

    assert await store.mark_verification_verified("req-1", datetime.now(UTC)) is None
    assert recorder.last.url.params["is_verified"] == "is.false"


async def test_insert_api_token_sends_pinned_id() -> None:
    row = {
        "id": "tok-id",
        "token": "secret",
        "user_email": "a@x.io",
        "is_active": True,
        "created_at": "2025-01-01T00:00:00Z",
        "expires_at": "2026-01-01T00:00:00Z",
        "invite_code_id": "inv-1",
    }
    recorder = Recorder(httpx.Response(201, json=[row]))
    store = SupabaseCredentialStore(_client(recorder))

    token = await store.insert_api_token(
        ApiTokenCreate(
            id="tok-id",
            token="secret",
            user_email="a@x.io",
            expires_at=datetime(2026, 1, 1, tzinfo=UTC),
            invite_code_id="inv-1",
        )
    )

    assert token.expires_at == datetime(2026, 1, 1, tzinfo=UTC)
    body = json.loads(recorder.last.content)
    assert body["id"] == "tok-id"
    assert body["is_active"] is True
    assert recorder.last.method == "POST"


async def test_list_api_tokens_orders_newest_first_and_filters() -> None:
    recorder = Recorder(httpx.Response(200, json=[]))
    store = SupabaseCredentialStore(_client(recorder))

    await store.list_api_tokens(owner_email="a@x.io", is_active=False)

    params = recorder.last.url.params
    assert params["order"] == "created_at.desc"
    assert params["user_email"] == "eq.a@x.io"
    assert params["is_active"] == "is.false"


async def test_is_admin() -> None:
    store = SupabaseCredentialStore(
        _client(Recorder(httpx.Response(200, json=[{"id": 1}]), httpx.Response(200, json=[])))
    )
    assert await store.is_admin("admin@x.io") is True
    assert await store.is_admin("user@x.io") is False


async def test_count_uses_head_with_exact_count() -> None:
    recorder = Recorder(httpx.Response(200, headers={"Content-Range": "0-0/17"}))
    client = _client(recorder)

    total = await client.table("api_logs").gte("request_time", datetime(2025, 1, 1, tzinfo=UTC)).count()

    assert total == 17
    assert recorder.last.method == "HEAD"
    assert recorder.last.headers["prefer"] == "count=exact"
    assert recorder.last.url.params["request_time"] == "gte.2025-01-01T00:00:00+00:00"


async def test_update_without_filters_is_refused() -> None:
    client = _client(Recorder())
    with pytest.raises(ValueError):
        await client.table("api_tokens").update({"is_active": False})


async def test_rpc_posts_params() -> None:
    recorder = Recorder(httpx.Response(200, json=[{"endpoint": "/x", "count": 1}]))
    rows = await _client(recorder).rpc("get_endpoint_counts", {"limit_count": 10})
    assert rows == [{"endpoint": "/x", "count": 1}]
    assert recorder.last.url.path == "/rest/v1/rpc/get_endpoint_counts"
    assert json.loads(recorder.last.content) == {"limit_count": 10}


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, BackendAuthorizationException),
        (403, BackendAuthorizationException),
        (409, ConstraintViolationException),
        (500, BackendUnavailableException),
        (503, BackendUnavailableException),
    ],
)
async def test_error_status_maps_to_failure_kind(status: int, expected: type) -> None:
    response = httpx.Response(status, json={"code": "XX", "message": "backend said no"})
    store = SupabaseCredentialStore(_client(Recorder(response)))
    with pytest.raises(expected) as exc_info:
        await store.get_api_token("tok-1")
    assert "backend said no" not in exc_info.value.message
    assert "backend said no" in str(exc_info.value)


async def test_conflict_names_the_table() -> None:
    response = httpx.Response(409, json={"code": "23505", "message": "duplicate key value"})
    store = SupabaseCredentialStore(_client(Recorder(response)))
    with pytest.raises(ConstraintViolationException) as exc_info:
        await store.insert_api_token(
            ApiTokenCreate(id="tok-1", token="secret", user_email="a@x.io", expires_at=None)
        )
    assert exc_info.value.message == "Conflicting api_tokens record"
    assert exc_info.value.details["resource_type"] == "api_tokens"
    assert exc_info.value.details["operation"] == "insert api_tokens"


async def test_transport_error_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = SupabaseCredentialStore(SupabaseRESTClient(BASE_URL, "k", http_client=http))
    with pytest.raises(BackendUnavailableException):
        await store.find_verification_request_by_token("t")


async def test_aclose_leaves_injected_client_open() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(Recorder()))
    client = SupabaseRESTClient(BASE_URL, "k", http_client=http)
    await client.aclose()
    assert http.is_closed is False
    await http.aclose()


async def test_usage_logs_embed_token_owner_and_paginate() -> None:
    row = {
        "id": 7,
        "token_id": "tok-1",
        "endpoint": "/search",
        "request_time": "2025-01-01T10:00:00+00:00",
        "response_time": "0.25",
        "api_tokens": {"user_email": "ada@example.com"},
    }
    recorder = Recorder(httpx.Response(200, json=[row]))
    store = SupabaseUsageStatsStore(_client(recorder))

    (log,) = await store.list_api_logs(limit=10, offset=20)

    assert (log.id, log.user_email, log.response_time) == ("7", "ada@example.com", 0.25)
    params = recorder.last.url.params
    assert params["select"] == "*,api_tokens(user_email)"
    assert params["order"] == "request_time.desc"
    assert (params["limit"], params["offset"]) == ("10", "20")


async def test_usage_count_response_time_bucket_filters() -> None:
    recorder = Recorder(httpx.Response(200, headers={"Content-Range": "*/3"}))
    store = SupabaseUsageStatsStore(_client(recorder))

    total = await store.count_api_logs(with_response_time=True, response_time_min=0.2, response_time_max=0.5)

    assert total == 3
    values = recorder.last.url.params.get_list("response_time")
    assert values == ["not.is.null", "gte.0.2", "lt.0.5"]
