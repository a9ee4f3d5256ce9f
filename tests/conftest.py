"""Pytest configuration and fixtures for tokengate.

Settings need SUPABASE_URL and SUPABASE_ANON_KEY, so test defaults are set
before tokengate.main is imported. HTTP tests run against the ASGI app with
in-memory collaborators placed on app.state (the lifespan is not run), so
no Supabase project is contacted.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SITE_URL", "https://tokens.example.com")

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from tests.fakes import (  # noqa: E402
    FakeIdentityProvider,
    InMemoryCredentialStore,
    RecordingEmailSender,
)
from tokengate.core.limiter import limiter  # noqa: E402
from tokengate.main import app  # noqa: E402

USER_EMAIL = "analyst@example.com"
ADMIN_EMAIL = "admin@example.com"
COOKIE_NAME = "sb-access-token"


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def usage_stats_store() -> AsyncMock:
    """IUsageStatsStore mock; tests set return values per call."""
    mock = AsyncMock()
    mock.list_api_logs.return_value = []
    mock.count_api_logs.return_value = 0
    mock.count_api_tokens.return_value = 0
    mock.list_token_owner_emails.return_value = []
    mock.call_aggregate.return_value = []
    return mock


@pytest.fixture
async def client(
    store: InMemoryCredentialStore,
    email_sender: RecordingEmailSender,
    identity_provider: FakeIdentityProvider,
    usage_stats_store: AsyncMock,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) with fake collaborators wired in."""
    app.state.credential_store = store
    app.state.usage_stats_store = usage_stats_store
    app.state.identity_provider = identity_provider
    app.state.email_sender = email_sender
    limiter.enabled = False
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        limiter.enabled = True
        for name in ("credential_store", "usage_stats_store", "identity_provider", "email_sender"):
            setattr(app.state, name, None)


@pytest.fixture
def user_headers(identity_provider: FakeIdentityProvider) -> dict[str, str]:
    """Session cookie for a signed-in, non-admin user."""
    token = identity_provider.add_user(USER_EMAIL)
    return {"Cookie": f"{COOKIE_NAME}={token}"}


@pytest.fixture
def admin_headers(
    identity_provider: FakeIdentityProvider, store: InMemoryCredentialStore
) -> dict[str, str]:
    """Session cookie for a signed-in admin."""
    token = identity_provider.add_user(ADMIN_EMAIL)
    store.admins.add(ADMIN_EMAIL)
    return {"Cookie": f"{COOKIE_NAME}={token}"}
