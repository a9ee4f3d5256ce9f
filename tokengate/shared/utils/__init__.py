"""Shared utilities: datetime, generators, sanitization."""

from tokengate.shared.utils.datetime import (
    ensure_utc,
    parse_timestamp,
    start_of_day,
    to_iso,
    utc_now,
)
from tokengate.shared.utils.generators import derive_token_id, generate_secret_token
from tokengate.shared.utils.sanitization import (
    InputSanitizer,
    normalize_email,
    sanitize_text,
    validate_invite_code,
)

__all__ = [
    "derive_token_id",
    "generate_secret_token",
    "utc_now",
    "ensure_utc",
    "parse_timestamp",
    "to_iso",
    "start_of_day",
    "InputSanitizer",
    "normalize_email",
    "sanitize_text",
    "validate_invite_code",
]
