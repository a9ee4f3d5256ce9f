"""HTTP middleware: timeout, request ID, correlation ID, security headers, access gate.

Applied in tokengate.main; order matters (last added = outermost).
"""

from tokengate.middleware.access_gate import AccessGateMiddleware
from tokengate.middleware.correlation_id import CorrelationIDMiddleware
from tokengate.middleware.request_id import RequestIDMiddleware
from tokengate.middleware.security_headers import SecurityHeadersMiddleware
from tokengate.middleware.timeout import TimeoutMiddleware

__all__ = [
    "AccessGateMiddleware",
    "CorrelationIDMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
