"""Correlation ID middleware.

Propagates X-Correlation-ID across calls: the client's value if given,
else the request id, else a new UUID.
"""

import uuid
from typing import Callable

from tokengate.middleware._asgi import get_header, with_response_header
from tokengate.middleware.request_id import sanitize_request_id


def CorrelationIDMiddleware(app: Callable, header_name: str = "X-Correlation-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        state = scope.setdefault("state", {})
        raw = get_header(scope, header_name)
        correlation_id = (
            sanitize_request_id(raw) if raw else state.get("request_id") or str(uuid.uuid4())
        )
        state["correlation_id"] = correlation_id
        await app(scope, receive, with_response_header(send, header_name, correlation_id))

    return asgi_app
