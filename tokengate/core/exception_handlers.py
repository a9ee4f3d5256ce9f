"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to JSON responses {error, message, details}. Backend failures
are logged with their backend detail and answered with the exception's
generic message only.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tokengate.core.config import get_settings
from tokengate.domain.exceptions import TokenGateException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "CONSTRAINT_VIOLATION": 409,
    "DELIVERY_ERROR": 502,
    "SERVICE_UNAVAILABLE": 503,
    "BACKEND_FORBIDDEN": 503,
}

# Collaborator failures: details carry backend operation/status, not for clients
_OPAQUE_CODES = frozenset({"SERVICE_UNAVAILABLE", "BACKEND_FORBIDDEN", "DELIVERY_ERROR", "CONSTRAINT_VIOLATION"})


def _tokengate_exception_handler(request: Request, exc: TokenGateException) -> JSONResponse:
    """Return JSON from TokenGateException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    content = exc.to_dict()
    if exc.error_code in _OPAQUE_CODES:
        logger.warning("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc)
        content["details"] = {k: v for k, v in exc.details.items() if k == "state"}
    headers = {"Retry-After": "30"} if status == 503 else None
    return JSONResponse(status_code=status, content=content, headers=headers)


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with field-level validation errors (input values omitted)."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": errors,
        },
    )


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: TokenGateException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(TokenGateException, _tokengate_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
