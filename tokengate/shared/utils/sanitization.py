"""Input sanitization utilities for XSS and injection prevention."""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs before they reach email templates or admin views.

    Application form fields (name, organization, purpose) are free text that
    the email function interpolates into HTML, so every tag is stripped.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()
    ALLOWED_ATTRIBUTES: ClassVar[dict[str, set[str]]] = {}
    CODE_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
    _WHITESPACE: ClassVar[re.Pattern[str]] = re.compile(r"\s+")

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags and sanitize with nh3 (strict by default).

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        return nh3.clean(
            value,
            tags=cls.ALLOWED_TAGS,
            attributes=cls.ALLOWED_ATTRIBUTES,
        )

    @classmethod
    def sanitize_text(cls, value: str | None, max_length: int = 500) -> str | None:
        """Strip tags, collapse whitespace, and truncate a free-text field."""
        if value is None:
            return None
        cleaned = cls._WHITESPACE.sub(" ", cls.sanitize_html(value)).strip()
        return cleaned[:max_length]

    @classmethod
    def sanitize_code(cls, value: str) -> str:
        """Validate an invite code literal. Allows alphanumeric, underscore, hyphen.

        Args:
            value: Raw code as typed by the applicant.

        Returns:
            The trimmed code if valid.

        Raises:
            ValueError: If format is invalid.
        """
        value = (value or "").strip()
        if not cls.CODE_PATTERN.match(value):
            raise ValueError("Invalid invite code format")
        return value


def sanitize_text(value: str | None, max_length: int = 500) -> str | None:
    """Module-level shortcut for InputSanitizer.sanitize_text."""
    return InputSanitizer.sanitize_text(value, max_length=max_length)


def validate_invite_code(value: str) -> str:
    """Validate and return an invite code; raises ValueError if invalid."""
    return InputSanitizer.sanitize_code(value)


def normalize_email(value: str) -> str:
    """Canonical form for stored and compared addresses (the auth provider's form)."""
    return value.strip().lower()
