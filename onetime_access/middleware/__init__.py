"""HTTP middleware: timeout, request ID, security headers.

Applied in main app; the last one added runs outermost.
"""

from onetime_access.middleware.request_id import RequestIDMiddleware
from onetime_access.middleware.security_headers import SecurityHeadersMiddleware
from onetime_access.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
