"""Helpers shared by the raw ASGI middlewares (headers, cookies, short-circuit responses)."""

import json
from typing import Any, Callable

from starlette.requests import cookie_parser


def get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == want:
            return value.decode("utf-8", errors="replace")
    return None


def get_cookie(scope: dict, name: str) -> str | None:
    raw = get_header(scope, "cookie")
    if not raw:
        return None
    return cookie_parser(raw).get(name) or None


def with_response_header(send: Callable, name: str, value: str) -> Callable:
    """Wrap send so the response start message carries one more header."""
    encoded = (name.encode(), value.encode())

    async def send_wrapper(message: dict) -> None:
        if message["type"] == "http.response.start":
            headers = list(message.get("headers", []))
            headers.append(encoded)
            message["headers"] = headers
        await send(message)

    return send_wrapper


async def send_json(send: Callable, status: int, content: dict[str, Any]) -> None:
    body = json.dumps(content).encode()
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
        ],
    })
    await send({"type": "http.response.body", "body": body, "more_body": False})


async def send_redirect(send: Callable, location: str, status: int = 303) -> None:
    await send({
        "type": "http.response.start",
        "status": status,
        "headers": [
            (b"location", location.encode()),
            (b"content-length", b"0"),
        ],
    })
    await send({"type": "http.response.body", "body": b"", "more_body": False})
