"""
Static assets for the built single-page application.

Requests that resolve to a file under the static root are served by
Starlette's StaticFiles as usual (MIME type, etag, last-modified, 304s and
path-traversal protection all come from there). Any lookup miss falls back to
the root index.html with a 200, so client-side routes such as
/dashboard/settings always receive the application shell.
"""

from __future__ import annotations

import logging
import os

import anyio
from starlette.exceptions import HTTPException
from starlette.responses import FileResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"


class SPAStaticFiles(StaticFiles):
    def __init__(self, directory, index: str = INDEX_DOCUMENT):
        # The root is only checked when a request needs it.
        super().__init__(directory=directory, check_dir=False)
        self.index_path = os.path.join(str(directory), index)

    async def check_config(self) -> None:
        try:
            await super().check_config()
        except RuntimeError as exc:
            # A missing root surfaces per request as a 404 from the fallback.
            logger.error("Static root unavailable: %s", exc)

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise
        return await self.fallback_response(path)

    async def fallback_response(self, path: str) -> Response:
        if not await anyio.to_thread.run_sync(os.path.isfile, self.index_path):
            logger.error("SPA index document missing at %s", self.index_path)
            raise HTTPException(status_code=404)
        logger.debug("No asset for /%s, serving %s", path, self.index_path)
        return FileResponse(self.index_path, media_type="text/html")
