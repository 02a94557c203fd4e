"""
ACTIVITY TRACKING
=================
One access-log line per request, tagged with a request id.

FLOW:
- Middleware runs inside SecurityHeadersMiddleware, before the HTTPS redirect.
- Echoes an incoming x-request-id or mints one, then logs it with the outcome.

HOW:
- Writes to the "security.activity" logger; when a log file is configured
  the logger also gets a rotating file handler.
- Secrets in the query string are masked before logging.
"""

from __future__ import annotations

import logging
import os
import re
import uuid
from logging.handlers import RotatingFileHandler

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ACTIVITY_LOGGER = "security.activity"
REQUEST_ID_HEADER = "x-request-id"

_SECRET_QUERY_PARAM = re.compile(r"\b((?:password|token|key|secret)=)([^&\s]+)", re.IGNORECASE)


def _redact_query(query: str) -> str:
    return _SECRET_QUERY_PARAM.sub(r"\1***", query)


def _get_logger(log_file: str | None = None) -> logging.Logger:
    logger = logging.getLogger(ACTIVITY_LOGGER)
    if not log_file or logger.handlers:
        return logger

    directory = os.path.dirname(log_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    return logger


class ActivityLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, log_file: str | None = None):
        super().__init__(app)
        self.logger = _get_logger(log_file)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        self.logger.info(
            "method=%s path=%s query=%s status=%s request_id=%s ip=%s",
            request.method,
            request.url.path,
            _redact_query(request.url.query),
            response.status_code,
            request_id,
            request.client.host if request.client else "unknown",
        )
        return response
