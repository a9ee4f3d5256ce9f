"""Settings validation: required Supabase values and unsafe combinations."""

import pytest
from pydantic import ValidationError

from tokengate.core.config import Settings

REQUIRED = {"supabase_url": "https://p.supabase.co", "supabase_anon_key": "anon"}


def test_defaults_load_with_required_values() -> None:
    settings = Settings(**REQUIRED)
    assert settings.verification_ttl_hours == 24
    assert settings.token_validity_days == 365
    assert settings.protected_prefixes == ["/manage", "/admin"]
    assert settings.admin_prefixes == ["/admin"]


def test_store_key_prefers_service_key() -> None:
    assert Settings(**REQUIRED).store_key == "anon"
    assert Settings(**REQUIRED, supabase_service_key="service").store_key == "service"


def test_verification_base_url() -> None:
    settings = Settings(**REQUIRED, site_url="https://tokens.example.com/")
    assert settings.verification_base_url == "https://tokens.example.com/verify"


@pytest.mark.parametrize(
    "overrides",
    [
        {"supabase_url": ""},
        {"supabase_url": "p.supabase.co"},
        {"supabase_anon_key": ""},
        {"verification_ttl_hours": 0},
        {"token_validity_days": -1},
        {"allowed_origins": "https://a.example,*"},
        {"debug": True, "telemetry_environment": "production"},
        {"admin_path_prefixes": "/console"},
    ],
)
def test_invalid_settings_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**{**REQUIRED, **overrides})


def test_debug_allowed_outside_production() -> None:
    assert Settings(**REQUIRED, debug=True).debug is True
