"""
apigw_synth.api.app

FastAPI app factory for the synthesis service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Map domain errors raised by the pure core onto HTTP responses.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from apigw_synth import __version__
from apigw_synth.api.deps import settings_dep
from apigw_synth.api.routers.gateways import router as gateways_router
from apigw_synth.api.routers.health import router as health_router
from apigw_synth.api.routers.names import router as names_router
from apigw_synth.api.routers.specs import router as specs_router
from apigw_synth.naming.allocator import NameAllocationError
from apigw_synth.observability.logging import configure_logging, get_logger
from apigw_synth.observability.middleware import RequestContextMiddleware
from apigw_synth.routing.errors import ConfigurationError
from apigw_synth.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        yield
        log.info("shutdown")

    app = FastAPI(
        title="API Gateway Surface Synthesis",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    # Routers resolve settings through this dependency; pin it to the app's settings.
    app.dependency_overrides[settings_dep] = lambda: settings

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(names_router)
    app.include_router(specs_router)
    app.include_router(gateways_router)

    @app.exception_handler(NameAllocationError)
    @app.exception_handler(ConfigurationError)
    async def _invalid_request(_: Request, exc: ValueError) -> JSONResponse:
        log.warning("invalid_request", error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


# --- Module Notes -----------------------------------------------------------
# `DowngradeError` is deliberately not mapped: it signals a synthesis bug and surfaces
# as a 500 with the traceback in the structured log.
