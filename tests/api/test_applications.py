"""Application and verification flow over HTTP: apply, verify (JSON and HTML link target)."""

from httpx import AsyncClient

from tests.conftest import COOKIE_NAME
from tests.fakes import FakeIdentityProvider, InMemoryCredentialStore, RecordingEmailSender

FORM = {
    "invite_code": "WELCOME2025",
    "email": "ada@example.com",
    "name": "Ada",
    "organization": "Analytical Engines",
    "purpose": "Research",
    "agree_terms": True,
}


async def _apply(client: AsyncClient, email_sender: RecordingEmailSender, **overrides) -> str:
    response = await client.post("/api/v1/applications", json={**FORM, **overrides})
    assert response.status_code == 202
    return email_sender.last("verification").payload["token"]


async def test_apply_with_valid_code_returns_success_without_token(
    client: AsyncClient, store: InMemoryCredentialStore, email_sender: RecordingEmailSender
) -> None:
    """Valid invite code: a verification request is created and the response hides the token."""
    store.add_invite_code("WELCOME2025")

    response = await client.post("/api/v1/applications", json=FORM)

    assert response.status_code == 202
    data = response.json()
    assert data["state"] == "email_sent"
    assert data["email"] == "ada@example.com"
    (request,) = store.verification_requests.values()
    assert request.token not in response.text
    assert email_sender.last("verification").payload["url"].startswith(
        "https://tokens.example.com/verify?token="
    )


async def test_apply_with_unknown_code_returns_400(client: AsyncClient) -> None:
    response = await client.post("/api/v1/applications", json=FORM)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.json()["details"] == {"field": "invite_code"}


async def test_apply_with_used_code_returns_400(
    client: AsyncClient, store: InMemoryCredentialStore
) -> None:
    store.add_invite_code("WELCOME2025", is_used=True)
    response = await client.post("/api/v1/applications", json=FORM)
    assert response.status_code == 400


async def test_apply_form_validation_returns_422(client: AsyncClient) -> None:
    response = await client.post("/api/v1/applications", json={**FORM, "agree_terms": False})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_apply_email_failure_returns_502(
    client: AsyncClient, store: InMemoryCredentialStore, email_sender: RecordingEmailSender
) -> None:
    store.add_invite_code("WELCOME2025")
    email_sender.fail_verification = True

    response = await client.post("/api/v1/applications", json=FORM)

    assert response.status_code == 502
    assert response.json()["details"] == {"state": "email_failed"}
    assert len(store.verification_requests) == 1


async def test_apply_store_down_returns_503_without_backend_detail(
    client: AsyncClient, store: InMemoryCredentialStore
) -> None:
    store.fail_on.add("find_invite_code_by_code")

    response = await client.post("/api/v1/applications", json=FORM)

    assert response.status_code == 503
    assert response.headers["retry-after"] == "30"
    assert response.json()["details"] == {"state": "request_failed"}
    assert "find_invite_code_by_code" not in response.text


async def test_verify_issues_token_and_marks_code_used(
    client: AsyncClient, store: InMemoryCredentialStore, email_sender: RecordingEmailSender
) -> None:
    """Valid link: new active token returned, invite code is_used becomes true."""
    invite = store.add_invite_code("WELCOME2025")
    token = await _apply(client, email_sender)

    response = await client.get("/api/v1/verify", params={"token": token})

    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "token_issued"
    assert data["token"]["status"] == "active"
    assert data["token"]["user_email"] == "ada@example.com"
    assert data["email_delivered"] is True
    assert store.invite_codes[invite.id].is_used is True
    assert len(store.api_tokens) == 1


async def test_verify_already_verified_link_fails(
    client: AsyncClient, store: InMemoryCredentialStore, email_sender: RecordingEmailSender
) -> None:
    """Replaying a consumed link is rejected and issues no second token."""
    store.add_invite_code("WELCOME2025")
    token = await _apply(client, email_sender)
    await client.get("/api/v1/verify", params={"token": token})

    response = await client.get("/api/v1/verify", params={"token": token})

    assert response.status_code == 400
    assert "invalid or expired" in response.json()["message"].lower()
    assert len(store.api_tokens) == 1


async def test_verify_missing_token_is_422(client: AsyncClient) -> None:
    response = await client.get("/api/v1/verify")
    assert response.status_code == 422


async def test_verify_page_shows_token_once(
    client: AsyncClient, store: InMemoryCredentialStore, email_sender: RecordingEmailSender
) -> None:
    """The emailed link lands on an HTML page showing the token, not cacheable."""
    store.add_invite_code("WELCOME2025")
    token = await _apply(client, email_sender)

    response = await client.get("/verify", params={"token": token})

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert response.headers["cache-control"] == "no-store"
    (issued,) = store.api_tokens.values()
    assert issued.token in response.text

    again = await client.get("/verify", params={"token": token})
    assert again.status_code == 400
    assert issued.token not in again.text


async def test_verify_page_store_down_is_503(
    client: AsyncClient, store: InMemoryCredentialStore
) -> None:
    store.fail_on.add("find_verification_request_by_token")
    response = await client.get("/verify", params={"token": "anything"})
    assert response.status_code == 503
    assert "try again later" in response.text


async def test_apply_page_renders_form(client: AsyncClient) -> None:
    response = await client.get("/apply")
    assert response.status_code == 200
    assert "invite_code" in response.text


async def test_mixed_case_applicant_sees_issued_token_under_manage(
    client: AsyncClient,
    store: InMemoryCredentialStore,
    email_sender: RecordingEmailSender,
    identity_provider: FakeIdentityProvider,
) -> None:
    """The form lowercases the address, so the signed-in owner's listing finds the token."""
    store.add_invite_code("WELCOME2025")
    token = await _apply(client, email_sender, email="Ada@Example.com")
    verified = await client.get("/api/v1/verify", params={"token": token})
    session = identity_provider.add_user("ada@example.com")

    listing = await client.get("/manage/tokens", headers={"Cookie": f"{COOKIE_NAME}={session}"})

    assert verified.json()["token"]["user_email"] == "ada@example.com"
    assert [t["id"] for t in listing.json()["items"]] == [verified.json()["token"]["id"]]
