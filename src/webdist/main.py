"""FastAPI entrypoint for serve mode."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from webdist import __version__
from webdist.assets import DirectoryAssets
from webdist.config import Settings, get_settings, validate_settings_for_env
from webdist.index import generate_serve_index, write_index_file
from webdist.routes.debug import router as debug_router
from webdist.routes.dist import router as dist_router
from webdist.routes.index import NO_FALLBACK_PREFIXES, index_response
from webdist.routes.index import router as index_router
from webdist.state import ServeState

logger = logging.getLogger(__name__)


def build_serve_state(settings: Settings) -> ServeState:
    """Render index.html and capture the start time; raises IndexRenderError."""
    assets = DirectoryAssets(settings.root_path)
    index = generate_serve_index(assets)
    return ServeState(
        index=index,
        index_file=write_index_file(index),
        assets=assets,
        started_at=datetime.now(UTC),
        cache_max_age_seconds=settings.cache_max_age_seconds,
    )


def create_app(state: ServeState | None = None, settings: Settings | None = None) -> FastAPI:
    owns_index_file = state is None
    if state is None:
        settings = settings or get_settings()
        validate_settings_for_env(settings)
        state = build_serve_state(settings)
        logger.info("Serving %s (index etag %s)", settings.root_path, state.index.etag)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            if owns_index_file:
                app.state.serve.index_file.unlink(missing_ok=True)

    app = FastAPI(
        title="webdist",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.serve = state
    app.include_router(index_router)
    app.include_router(dist_router)
    app.include_router(debug_router)

    @app.exception_handler(404)
    async def index_fallback(request: Request, exc: Exception) -> Response:
        if request.url.path.startswith(NO_FALLBACK_PREFIXES):
            return PlainTextResponse("404 page not found", status_code=404)
        return index_response(request)

    return app
