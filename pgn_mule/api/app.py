"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pgn_mule import __version__
from pgn_mule.api.dependencies import cleanup_dependencies, get_relay_service
from pgn_mule.api.routes import admin, feed, health
from pgn_mule.errors import MalformedRecordError, PgnMuleError

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resume polling every persisted source, stop everything on shutdown."""
    logger.info("pgn-mule starting up", version=__version__)

    service = await get_relay_service()
    started = await service.scheduler.start_all()
    logger.info("Resumed polling", sources=started)

    yield

    logger.info("pgn-mule shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="pgn-mule",
        description="Delayed, filtered PGN relay for chess broadcasts.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health checks"},
            {"name": "admin", "description": "Source and replacement management"},
            {"name": "feed", "description": "Aggregated PGN feeds"},
        ],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    @app.exception_handler(MalformedRecordError)
    async def malformed_record_handler(request: Request, exc: MalformedRecordError):
        logger.error("Unreadable persisted record", key=exc.key, reason=exc.reason)
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "error_type": "malformed_record"},
        )

    @app.exception_handler(PgnMuleError)
    async def relay_error_handler(request: Request, exc: PgnMuleError):
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc), "error_type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(admin.router, tags=["admin"])
    # Catch-all path route, must stay last
    app.include_router(feed.router, tags=["feed"])

    return app
