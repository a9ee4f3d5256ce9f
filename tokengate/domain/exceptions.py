"""Domain exceptions for the token service.

Defines domain-level exceptions that represent business rule violations and
collaborator failure kinds. These exceptions are independent of
infrastructure concerns; infrastructure raises subclasses of the failure
kinds. Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TokenGateException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description (safe to show).
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body ({error, message, details})."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TokenGateException):
    """Raised for user-correctable input: bad, expired or used invite code or verification token."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(TokenGateException):
    """Raised when no verified identity is available or sign-in fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(TokenGateException):
    """Raised when the identity lacks the admin flag for an admin-only action."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'api_token').
            action: Optional action that was attempted (e.g. 'revoke').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(TokenGateException):
    """Raised when a requested record is not found (or not visible to the caller)."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'api_token').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class BackendUnavailableException(TokenGateException):
    """Transient collaborator fault (network, timeout, 5xx). Shown as a generic retry-later message."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable; please try again later.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "SERVICE_UNAVAILABLE", details)


class BackendAuthorizationException(TokenGateException):
    """Store rejected the call for lack of permission (misconfigured key or row-level policy)."""

    def __init__(
        self,
        message: str = "Service temporarily unavailable; please try again later.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "BACKEND_FORBIDDEN", details)


class ConstraintViolationException(TokenGateException):
    """Store rejected a write because of a unique or foreign-key constraint."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(
            f"Conflicting {resource_type} record",
            "CONSTRAINT_VIOLATION",
            {"resource_type": resource_type},
        )


class DeliveryException(TokenGateException):
    """Email collaborator did not accept a message."""

    def __init__(
        self,
        message: str = "Email could not be sent; please try again later.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "DELIVERY_ERROR", details)
