"""
Secure HTTP headers middleware.

Adds security-related headers to every response:
- X-Content-Type-Options
- X-Frame-Options
- Referrer-Policy
- Content-Security-Policy

Responses from operator routes (admin sessions, review, overrides)
additionally carry ``Cache-Control: no-store`` so session tokens and
unpublished review state never land in shared caches.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

NO_STORE_PATH_PREFIXES = (
    "/api/v1/admin",
    "/api/v1/qualitative-review",
    "/api/v1/qualitative-overrides",
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds secure HTTP headers to every response.

    Args:
        app: The wrapped ASGI application.
        no_store_prefixes: Path prefixes whose responses must not be cached.
    """

    def __init__(self, app, no_store_prefixes: tuple[str, ...] = NO_STORE_PATH_PREFIXES) -> None:
        super().__init__(app)
        self._no_store_prefixes = no_store_prefixes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        for header_name, header_value in SECURE_HEADERS.items():
            response.headers[header_name] = header_value
        if request.url.path.startswith(self._no_store_prefixes):
            response.headers["Cache-Control"] = "no-store"
        return response
