"""
ERROR HANDLING SECURITY
=======================
Return generic error messages to avoid data leakage.
"""

# FLOW:
# - register_error_handlers(app) is called once from create_app().
# HOW:
# - HTTP errors answer with the standard reason phrase for their status.
# - Anything unexpected is logged with its traceback and answered with a bare 500.
# - That 500 is built outside the middleware stack, so it carries the hardening headers itself.

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from Security.headers_hardening import DEFAULT_SECURITY_HEADERS

logger = logging.getLogger(__name__)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.warning("%s %s failed with %s", request.method, request.url.path, exc.status_code)
            return JSONResponse({"detail": "An error occurred"}, status_code=exc.status_code)
        logger.debug("%s %s answered %s", request.method, request.url.path, exc.status_code)
        return JSONResponse(
            {"detail": _reason(exc.status_code)},
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            {"detail": "An error occurred"},
            status_code=500,
            headers=DEFAULT_SECURITY_HEADERS,
        )
