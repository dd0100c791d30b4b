"""HTTP adapter: exposes CacheHandlers as an ASGI application served by uvicorn.

A single catch-all route hands every request, whatever its method or path,
to ``CacheHandlers.dispatch`` so that path validation (404) always runs
before method validation (405).
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import Response, StreamingResponse
from starlette.endpoints import HTTPEndpoint
from starlette.requests import Request
from starlette.routing import Route

# Core / Domain Imports
from statuscache.core.handlers import CacheHandlers, CacheResponse
from statuscache.core.router import build_target
from statuscache.domain.interfaces.store import EntryStore
from statuscache.domain.models.common import ServerConfig

logger = logging.getLogger(__name__)


def to_http_response(result: CacheResponse) -> Response:
    """Converts a handler result into a Starlette response."""
    if result.stream is not None:
        return StreamingResponse(
            result.stream,
            status_code=result.status,
            media_type=result.content_type,
            headers=result.headers,
        )
    return Response(
        content=result.body,
        status_code=result.status,
        media_type=result.content_type,
        headers=result.headers,
    )


class CacheEndpoint(HTTPEndpoint):
    """Accepts every method; routing is left to CacheHandlers."""

    async def dispatch(self) -> None:
        request = Request(self.scope, receive=self.receive)
        handlers: CacheHandlers = request.app.state.handlers

        raw_path = self.scope.get("raw_path")
        path = raw_path.decode("latin-1") if raw_path else self.scope["path"]
        query = self.scope.get("query_string", b"").decode("latin-1")
        target = build_target(path, query)

        result = await handlers.dispatch(request.method, target, request.stream())
        response = to_http_response(result)
        await response(self.scope, self.receive, self.send)


def create_app(config: ServerConfig, store: EntryStore, handlers: Optional[CacheHandlers] = None) -> FastAPI:
    """Builds the ASGI application for the given configuration and store.

    The handlers are attached to ``app.state`` so request handling never
    reaches for module globals.
    """
    app = FastAPI(
        title="statuscache",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        routes=[Route("/{target:path}", CacheEndpoint)],
    )
    app.state.handlers = handlers or CacheHandlers(store)
    logger.debug(f"ASGI app created for cache directory {config.cache_dir}")
    return app


def run_server(config: ServerConfig, app: FastAPI, log_level: str = "info") -> None:
    """Serves ``app`` until the process is terminated (Serving state)."""
    logger.info(f"Serving on {config.base_url} (cache: {config.cache_dir})")
    # log_config=None keeps uvicorn on the root logger configured by setup_logging
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_config=None,
        log_level=log_level.lower(),
        access_log=False,
    )
