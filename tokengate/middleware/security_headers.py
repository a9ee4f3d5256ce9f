"""Security headers middleware.

JSON responses get a deny-all CSP; the few HTML pages get a policy that
permits their own inline style and script. Headers already set by the
route are left alone.
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}
API_CSP = "default-src 'none'; frame-ancestors 'none'"
HTML_CSP = (
    "default-src 'self'; style-src 'self' 'unsafe-inline'; "
    "script-src 'self' 'unsafe-inline'; form-action 'self'; frame-ancestors 'none'"
)


def _is_html(headers: list) -> bool:
    for name, value in headers:
        if name.lower() == b"content-type":
            return value.lower().startswith(b"text/html")
    return False


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    api_csp: str = API_CSP,
    html_csp: str = HTML_CSP,
) -> Callable:
    resolved = [(k.encode(), v.encode()) for k, v in (headers or DEFAULT_HEADERS).items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                out = list(message.get("headers", []))
                seen = {name.lower() for name, _ in out}
                csp = html_csp if _is_html(out) else api_csp
                for name, value in [*resolved, (b"content-security-policy", csp.encode())]:
                    if name.lower() not in seen:
                        out.append((name, value))
                        seen.add(name.lower())
                message["headers"] = out
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
