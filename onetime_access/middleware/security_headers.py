"""Security headers middleware.

API responses carry session tokens, so they get a locked-down CSP and
Cache-Control: no-store. The landing page gets a CSP that allows its inline
styles and web fonts. Other paths (/docs, /redoc) get only the common headers
since Swagger UI loads its scripts from a CDN. Raw ASGI (no BaseHTTPMiddleware).
"""

from typing import Callable

API_PATH_PREFIX = "/api/"
LANDING_PATH = "/"

COMMON_HEADERS = {
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

API_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}

PAGE_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
        "font-src https://fonts.gstatic.com; frame-ancestors 'none'"
    ),
}


def _encode(headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
    return [(k.lower().encode(), v.encode()) for k, v in headers.items()]


def SecurityHeadersMiddleware(
    app: Callable,
    api_headers: dict[str, str] | None = None,
    page_headers: dict[str, str] | None = None,
) -> Callable:
    """Set security headers on all responses; headers set by the route win. Raw ASGI."""
    api_list = _encode({**COMMON_HEADERS, **(api_headers or API_HEADERS)})
    page_list = _encode({**COMMON_HEADERS, **(page_headers or PAGE_HEADERS)})
    common_list = _encode(COMMON_HEADERS)

    def _headers_for(path: str) -> list[tuple[bytes, bytes]]:
        if path.startswith(API_PATH_PREFIX):
            return api_list
        if path == LANDING_PATH:
            return page_list
        return common_list

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = _headers_for(scope.get("path", ""))

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                seen = {h[0].lower() for h in headers}
                headers.extend(h for h in extra if h[0] not in seen)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
