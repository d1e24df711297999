"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from docsearcher import __version__
from docsearcher.api.deps import set_client
from docsearcher.api.responses import validation_error_handler
from docsearcher.api.router import router as searcher_router
from docsearcher.backends.base.registry import BackendRegistry
from docsearcher.config.settings import Settings
from docsearcher.observability.logging import setup_logging

API_PREFIX = "/searcher"

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, registry: BackendRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        registry: Backend registry. If None, only built-in backends are available.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Auto-detect docsearcher-config.yaml if present
        yaml_path = Path("docsearcher-config.yaml")
        settings = Settings.from_yaml(yaml_path) if yaml_path.exists() else Settings()

    setup_logging(settings.observability)
    backend_registry = registry or BackendRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Connect the configured backend; a failure aborts startup."""
        logger.info("Starting doc-searcher v%s with backend %s", __version__, settings.backend.kind)

        client = await backend_registry.from_settings(settings.backend)
        set_client(client)
        app.state.client = client

        logger.info("doc-searcher is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down doc-searcher...")
        await client.shutdown()
        set_client(None)
        logger.info("doc-searcher shutdown complete")

    app = FastAPI(
        title="doc-searcher",
        description=(
            "Search-service façade exposing cluster, bucket and document management "
            "plus full-text and fuzzy-hash similarity search over pluggable engines."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        logger.info(
            "%s %s -> %d (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            int((time.monotonic() - start) * 1000),
        )
        return response

    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.include_router(searcher_router, prefix=API_PREFIX)

    return app
