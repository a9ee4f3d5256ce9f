"""API v1 router aggregation.

Three routers share the endpoint modules:

- api_router (mounted at /api/v1): public application/verification flow,
  auth proxies, health.
- manage_router (mounted at /manage): the signed-in user's own tokens.
- admin_router (mounted at /admin): token console, API logs, statistics.

/manage and /admin sit behind the access gate; their route dependencies
still require an identity (and the admin flag) on every call.
"""

from fastapi import APIRouter

from tokengate.api.v1.endpoints import (
    admin_logs,
    admin_stats,
    admin_tokens,
    applications,
    auth,
    health,
    manage_tokens,
    verification,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(applications.router, prefix="/applications", tags=["applications"])
api_router.include_router(verification.router, prefix="/verify", tags=["verification"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

manage_router = APIRouter()
manage_router.include_router(manage_tokens.router, tags=["manage"])

admin_router = APIRouter()
admin_router.include_router(admin_tokens.router, tags=["admin-tokens"])
admin_router.include_router(admin_logs.router, tags=["admin-logs"])
admin_router.include_router(admin_stats.router, tags=["admin-stats"])
