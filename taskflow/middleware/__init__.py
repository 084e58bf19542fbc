"""HTTP middleware: timeout, request ID, security headers.

Applied in the main app; order matters (first added = outermost).
"""

from taskflow.middleware.request_id import RequestIDMiddleware
from taskflow.middleware.security_headers import SecurityHeadersMiddleware
from taskflow.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
