"""API version 1."""

from tokengate.api.v1.router import admin_router, api_router, manage_router

__all__ = ["admin_router", "api_router", "manage_router"]
