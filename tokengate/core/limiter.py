"""Rate limiter instance for SlowAPI.

Shared so main (app.state.limiter) and route modules use one instance.
Limits are keyed by client address; the limit strings live here only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

APPLY_LIMIT = "5/minute"
VERIFY_LIMIT = "10/minute"
AUTH_LIMIT = "10/minute"
PASSWORD_RESET_LIMIT = "3/minute"
ADMIN_WRITE_LIMIT = "60/minute"

limit_apply = limiter.limit(APPLY_LIMIT)
limit_verify = limiter.limit(VERIFY_LIMIT)
limit_auth = limiter.limit(AUTH_LIMIT)
limit_password_reset = limiter.limit(PASSWORD_RESET_LIMIT)
limit_admin_writes = limiter.limit(ADMIN_WRITE_LIMIT)
