"""
Application factory and process entry point.

Middleware order, outermost first:
security headers -> access log (request id) -> HTTPS redirect -> static/SPA.
"""

from __future__ import annotations

import logging
import sys

import dotenv
import uvicorn
from fastapi import FastAPI

from Security.activity_logging import ActivityLoggingMiddleware
from Security.error_handling import register_error_handlers
from Security.headers_hardening import SecurityHeadersMiddleware
from Security.https_tls import HTTPSRedirectMiddleware
from spa_server.config import Settings, load_settings
from spa_server.spa import SPAStaticFiles

logger = logging.getLogger("spa_server")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(settings: Settings) -> FastAPI:
    # No API surface: every path belongs to the SPA, including /docs.
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings

    register_error_handlers(app)

    # add_middleware prepends, so the last one added runs first.
    app.add_middleware(HTTPSRedirectMiddleware, enabled=settings.is_production)
    app.add_middleware(ActivityLoggingMiddleware, log_file=settings.access_log_file)
    app.add_middleware(SecurityHeadersMiddleware)

    app.mount("/", SPAStaticFiles(directory=settings.static_root), name="spa")

    @app.on_event("startup")
    async def announce_ready():
        logger.info("Server running on http://localhost:%s/", settings.port)

    logger.debug("Serving %s in %s mode", settings.static_root, settings.mode)
    return app


def main() -> None:
    dotenv.load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)

    try:
        app = create_app(settings)
        config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            server_header=False,
            log_config=None,
        )
        uvicorn.Server(config).run()
    except Exception:
        logger.exception("Server failed to start")
        sys.exit(1)


if __name__ == "__main__":
    main()
