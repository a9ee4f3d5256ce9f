"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SUPABASE_URL, SUPABASE_ANON_KEY) are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except the Supabase project URL
    and anon key, validated in validate_required.
    """

    # App
    app_name: str = "tokengate"
    app_version: str = "1.0.0"
    debug: bool = False

    # Supabase project (store, auth, edge functions share one base URL)
    supabase_url: str = ""
    supabase_anon_key: SecretStr = SecretStr("")
    # Server-side key for store calls; falls back to the anon key when unset.
    supabase_service_key: SecretStr | None = None
    supabase_timeout_seconds: float = 15.0

    # Public base URL used to build verification links (e.g. https://tokens.example.com)
    site_url: str = "http://localhost:8000"
    verify_path: str = "/verify"

    # Pipeline
    verification_ttl_hours: int = 24
    token_validity_days: int = 365

    # Access gate
    protected_path_prefixes: str = "/manage,/admin"
    admin_path_prefixes: str = "/admin"
    login_path: str = "/login"
    non_admin_path: str = "/manage"
    redirect_param: str = "redirectTo"
    # Admin paths redirect to non_admin_path when the admin lookup fails.
    access_gate_admin_fail_closed: bool = True
    access_cookie_name: str = "sb-access-token"
    access_cookie_secure: bool = True

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env.

        - SUPABASE_URL must be an http(s) URL.
        - SUPABASE_ANON_KEY must be non-empty.
        - ALLOWED_ORIGINS may not contain '*' (cookies are sent cross-origin).
        - DEBUG may not be on in production.
        - Every configured admin prefix must also be protected.
        """
        if not self.supabase_url:
            raise ValueError(
                "SUPABASE_URL is required (e.g. https://<project>.supabase.co). "
                "Set in environment or .env file."
            )
        if not self.supabase_url.startswith(("http://", "https://")):
            raise ValueError(
                f"SUPABASE_URL must start with http:// or https://, got: {self.supabase_url!r}"
            )
        if not self.supabase_anon_key.get_secret_value():
            raise ValueError(
                "SUPABASE_ANON_KEY is required. Copy it from Project Settings → API."
            )
        if self.verification_ttl_hours <= 0:
            raise ValueError("verification_ttl_hours must be positive")
        if self.token_validity_days <= 0:
            raise ValueError("token_validity_days must be positive")
        if "*" in _split_csv(self.allowed_origins):
            raise ValueError(
                "allowed_origins must list explicit origins; '*' is not allowed with credentials"
            )
        if self.debug and self.telemetry_environment == "production":
            raise ValueError("debug must be False when telemetry_environment is production")
        protected = self.protected_prefixes
        for prefix in self.admin_prefixes:
            if not any(prefix.startswith(p) for p in protected):
                raise ValueError(
                    f"Admin prefix {prefix!r} must also be listed in PROTECTED_PATH_PREFIXES"
                )
        return self

    @property
    def protected_prefixes(self) -> list[str]:
        return _split_csv(self.protected_path_prefixes)

    @property
    def admin_prefixes(self) -> list[str]:
        return _split_csv(self.admin_path_prefixes)

    @property
    def store_key(self) -> str:
        """Key used for PostgREST calls: service key if configured, else anon key."""
        if self.supabase_service_key and self.supabase_service_key.get_secret_value():
            return self.supabase_service_key.get_secret_value()
        return self.supabase_anon_key.get_secret_value()

    @property
    def verification_base_url(self) -> str:
        return f"{self.site_url.rstrip('/')}{self.verify_path}"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
