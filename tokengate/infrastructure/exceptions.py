"""Infrastructure exceptions for Supabase store, auth, and edge-function calls.

Each extends a domain failure kind so the application layer can catch it
without importing infrastructure. `message` stays generic and safe to
show; the backend's own text is kept in `backend_message` and only
appears in str(exc), i.e. in logs.
"""

from tokengate.domain.exceptions import (
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
    DeliveryException,
)


class _LoggableBackendError:
    """str() includes the operation, status and backend message for log lines."""

    details: dict
    backend_message: str

    def __str__(self) -> str:
        op = self.details.get("operation") or self.details.get("function") or self.details.get("resource_type")
        status = self.details.get("status_code")
        text = f"{op} failed (status={status})"
        if self.backend_message:
            text += f": {self.backend_message}"
        return text


class StoreUnavailableError(_LoggableBackendError, BackendUnavailableException):
    """Store call failed in transport, timed out, or returned 5xx/unexpected status."""

    def __init__(
        self, operation: str, status_code: int | None = None, backend_message: str = ""
    ) -> None:
        super().__init__(details={"operation": operation, "status_code": status_code})
        self.backend_message = backend_message


class StoreAuthorizationError(_LoggableBackendError, BackendAuthorizationException):
    """Store returned 401/403 (bad key or row-level security policy)."""

    def __init__(self, operation: str, status_code: int, backend_message: str = "") -> None:
        super().__init__(details={"operation": operation, "status_code": status_code})
        self.backend_message = backend_message


class StoreConstraintError(_LoggableBackendError, ConstraintViolationException):
    """Store returned 409 (unique or foreign-key violation)."""

    def __init__(self, resource_type: str, operation: str, backend_message: str = "") -> None:
        super().__init__(resource_type)
        self.details.update(operation=operation, status_code=409)
        self.backend_message = backend_message


class AuthProviderUnavailableError(_LoggableBackendError, BackendUnavailableException):
    """Auth provider call failed in transport or returned 5xx."""

    def __init__(
        self, operation: str, status_code: int | None = None, backend_message: str = ""
    ) -> None:
        super().__init__(details={"operation": operation, "status_code": status_code})
        self.backend_message = backend_message


class EmailFunctionError(_LoggableBackendError, DeliveryException):
    """Email edge function returned non-2xx or was unreachable."""

    def __init__(
        self, function_name: str, status_code: int | None = None, backend_message: str = ""
    ) -> None:
        super().__init__(details={"function": function_name, "status_code": status_code})
        self.backend_message = backend_message
