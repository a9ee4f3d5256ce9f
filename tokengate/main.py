"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, middleware, routers.
No business logic here. See tokengate.core.lifespan and
tokengate.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from tokengate.api.pages import router as pages_router
from tokengate.api.v1 import admin_router, api_router, manage_router
from tokengate.core.config import get_settings
from tokengate.core.exception_handlers import register_exception_handlers
from tokengate.core.lifespan import create_lifespan
from tokengate.core.limiter import limiter
from tokengate.middleware import (
    AccessGateMiddleware,
    CorrelationIDMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    TimeoutMiddleware,
)
from tokengate.pages import render_root_page
from tokengate.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: timeout → request ID → correlation ID → security → CORS → access gate.
    app.add_middleware(
        AccessGateMiddleware,
        protected_prefixes=settings.protected_prefixes,
        admin_prefixes=settings.admin_prefixes,
        login_path=settings.login_path,
        non_admin_path=settings.non_admin_path,
        redirect_param=settings.redirect_param,
        cookie_name=settings.access_cookie_name,
        admin_fail_closed=settings.access_gate_admin_fail_closed,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(CorrelationIDMiddleware, header_name=settings.correlation_id_header)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(manage_router, prefix="/manage")
    app.include_router(admin_router, prefix="/admin")
    app.include_router(pages_router)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def root() -> HTMLResponse:
        """Landing page with links to apply, sign in, and the API docs."""
        return HTMLResponse(content=render_root_page(settings.app_name))

    return app


app = create_app()
