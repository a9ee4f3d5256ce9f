"""Request ID middleware.

Forwards a client X-Request-ID when it is safe to log, otherwise mints one,
and echoes it on the response. Raw ASGI so streaming responses pass untouched.
"""

import re
import uuid
from typing import Callable

from tokengate.middleware._asgi import get_header, with_response_header

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,%d}$" % REQUEST_ID_MAX_LENGTH)


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if it matches the safe pattern, else a fresh UUID (no log injection)."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_PATTERN.match(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Store the request id on scope state and return it in header_name."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        await app(scope, receive, with_response_header(send, header_name, request_id))

    return asgi_app
