"""FastAPI application factory.

Main entry point for the verbario Web API. Run with:
    uvicorn verbario.web.api:create_app --factory
or `verbario serve`.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Scope

from verbario import __version__
from verbario.config.app_config import AppConfig, load_app_config
from verbario.core.authorization import SecretGuard
from verbario.core.errors import VerbarioError
from verbario.db.database import RecordStore
from verbario.web.rate_limit import FixedWindowLimiter, RateLimitMiddleware
from verbario.web.routes import health_router, translations_router, verbs_router

logger = structlog.get_logger(__name__)


class FrontendFiles(StaticFiles):
    """Static files that fall back to index.html for client-side routes."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as e:
            if e.status_code != status.HTTP_404_NOT_FOUND or path.startswith("api"):
                raise
            return await super().get_response("index.html", scope)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect the store on startup, release it on shutdown."""
    store: RecordStore = app.state.store
    owns_connection = not store.is_connected
    store.connect()
    logger.info("api_startup", store=str(store.path), env=app.state.config.app_env)
    try:
        yield
    finally:
        if owns_connection:
            store.close()
        logger.info("api_shutdown")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(VerbarioError)
    async def domain_error_handler(request: Request, exc: VerbarioError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )


def create_app(config: AppConfig | None = None, store: RecordStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings; loaded from the environment when omitted
        store: Store handle; built from config when omitted. A store that
            is already connected is left open on shutdown.

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()
    store = store or RecordStore(config.store_path, connect_timeout=config.connect_timeout)

    app = FastAPI(
        title="Verbario API",
        description="Spanish verb conjugations and English–Hungarian translations",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store
    app.state.guard = SecretGuard(config.admin_password)

    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowLimiter(
            max_requests=config.rate_limit.max_requests,
            window_seconds=config.rate_limit.window_seconds,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.app_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(verbs_router)
    app.include_router(translations_router)

    if config.is_production:
        _mount_frontend(app, config.static_dir)

    return app


def _mount_frontend(app: FastAPI, static_dir: Path) -> None:
    if not (static_dir / "index.html").is_file():
        logger.warning("frontend_missing", static_dir=str(static_dir))
        return
    app.mount("/", FrontendFiles(directory=static_dir, html=True), name="frontend")
    logger.info("frontend_mounted", static_dir=str(static_dir))
