"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_delivery import __version__
from resume_delivery.api.routes import router
from resume_delivery.config import AppConfig, load_config
from resume_delivery.exceptions import (
    ArtifactNotFoundError,
    ProfileValidationError,
    RenderError,
    StoreError,
)
from resume_delivery.export.engines import EngineLauncher
from resume_delivery.export.renderer import DocumentRenderer, page_options_from_config
from resume_delivery.pipeline.delivery import DeliveryService
from resume_delivery.pipeline.orchestrator import ResumePipeline
from resume_delivery.storage.artifact_store import ArtifactStore
from resume_delivery.storage.reaper import ExpiryReaper

logger = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to generate resume"
INTERNAL_ERROR = "Internal server error"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@asynccontextmanager
async def _lifespan(app: FastAPI):
    reaper: ExpiryReaper = app.state.reaper
    reaper.start()
    try:
        yield
    finally:
        await reaper.stop()
        logger.info("Shutting down with store stats %s", app.state.store.stats())


def create_app(
    config: AppConfig | None = None,
    *,
    store: ArtifactStore | None = None,
    renderer: DocumentRenderer | None = None,
    launcher: EngineLauncher | None = None,
) -> FastAPI:
    """Build the app with one long-lived store and renderer."""
    config = config or load_config()
    store = store or ArtifactStore(config.store)
    renderer = renderer or DocumentRenderer.from_config(config.renderer, launcher)

    app = FastAPI(
        title="Resume Delivery API",
        description="Renders resumes to PDF and serves them for a short download window.",
        version=__version__,
        lifespan=_lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.server.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.store = store
    app.state.renderer = renderer
    app.state.reaper = ExpiryReaper(store)
    app.state.pipeline = ResumePipeline(
        renderer,
        store,
        page_options=page_options_from_config(config.renderer),
        download_prefix=config.server.download_prefix,
    )
    app.state.delivery = DeliveryService(store)
    app.include_router(router)

    @app.exception_handler(ProfileValidationError)
    async def _validation_failed(request: Request, exc: ProfileValidationError):
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError):
        logger.debug("Rejected request body: %s", exc.errors())
        return _error(400, "Invalid request body")

    @app.exception_handler(ArtifactNotFoundError)
    async def _not_found(request: Request, exc: ArtifactNotFoundError):
        return _error(404, "File not found")

    @app.exception_handler(RenderError)
    @app.exception_handler(StoreError)
    async def _generation_failed(request: Request, exc: Exception):
        # details are already logged by the pipeline
        return _error(500, GENERATION_FAILED)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.error(
            "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc
        )
        return _error(500, INTERNAL_ERROR)

    return app
