"""
HTTPS ENFORCEMENT
=================
Redirect plain HTTP to HTTPS when running behind a TLS-terminating proxy.

FLOW:
- HTTPSRedirectMiddleware checks x-forwarded-proto on every request.
- Only wired as active in production; otherwise it passes everything through.

HOW:
- Anything other than exactly "https" gets a 302 to https://<Host><target>.

TRUST:
- x-forwarded-proto and Host are taken verbatim. There is no proxy allow-list,
  so the process must not be reachable by clients except through the proxy.
  A spoofed header can only cause a redirect to HTTPS or skip one.
"""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

logger = logging.getLogger(__name__)


def request_target(request: Request) -> str:
    """Raw path plus query string, as the client sent it."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        target = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        target = request.scope.get("root_path", "") + request.scope["path"]
    query = request.scope.get("query_string", b"")
    if query:
        target += "?" + query.decode("latin-1")
    return target


def https_location(request: Request) -> str:
    host = request.headers.get("host", "")
    return "https://" + host + request_target(request)


class HTTPSRedirectMiddleware(BaseHTTPMiddleware):
    """Redirect HTTP to HTTPS using X-Forwarded-Proto when behind a proxy."""

    def __init__(self, app, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.enabled:
            return await call_next(request)

        if request.headers.get("x-forwarded-proto") != "https":
            location = https_location(request)
            logger.debug("Redirecting %s %s to %s", request.method, request.url.path, location)
            return RedirectResponse(url=location, status_code=302)

        return await call_next(request)
