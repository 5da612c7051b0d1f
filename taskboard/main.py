"""Taskboard Backend - FastAPI Application."""

import time
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import Settings, get_settings
from taskboard.database import create_engine_from_settings, create_session_maker, init_db
from taskboard.deps import DbSession
from taskboard.logger import configure_logging, get_logger
from taskboard.rate_limit import build_auth_rate_limiters
from taskboard.routers import auth, tasks
from taskboard.utils import format_validation_errors

logger = get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - init DB on startup, release resources on shutdown."""
    await init_db(app.state.engine)
    logger.info("Application started", version=VERSION, environment=app.state.settings.environment)
    yield

    # Close rate limiters (Redis connections)
    app.state.rate_limiters.close()
    await app.state.engine.dispose()
    logger.info("Application shutting down")


async def logging_middleware(request: Request, call_next: Any) -> Response:
    """Middleware to inject Request-ID and log request details."""
    request_id = request.headers.get("X-Request-ID", str(uuid4()))

    # structlog.contextvars are isolated per async context/task; clear to start
    # the request with a clean slate.
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start_time = time.perf_counter()
    try:
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        logger.info(
            "HTTP Request",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id
        return response
    except Exception as exc:
        duration = time.perf_counter() - start_time
        logger.exception(
            "HTTP Request Failed",
            duration_ms=round(duration * 1000, 2),
            error=str(exc),
        )
        raise


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 with one entry per offending field."""
    return JSONResponse(
        status_code=400,
        content={"errors": format_validation_errors(exc.errors())},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler to ensure JSON response."""
    settings: Settings = request.app.state.settings

    content: dict[str, Any] = {
        "detail": "Something went wrong!",
        "request_id": structlog.contextvars.get_contextvars().get("request_id"),
    }
    # Only show exception details in DEBUG mode
    if settings.debug:
        content["detail"] = str(exc)
        content["trace"] = traceback.format_exc()

    return JSONResponse(status_code=500, content=content)


async def root() -> PlainTextResponse:
    return PlainTextResponse("API is running...")


async def health_check(db: DbSession) -> JSONResponse:
    """Check application health status.

    Returns 200 when the store answers, 503 otherwise.
    """
    checks: dict[str, bool] = {}
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except SQLAlchemyError as exc:
        logger.error(
            "Health check: database unreachable",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        checks["database"] = False

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "healthy" if all_healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
            "version": VERSION,
        },
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one configuration snapshot."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Taskboard API",
        description="User accounts and per-user task management",
        version=VERSION,
        lifespan=lifespan,
    )

    engine = create_engine_from_settings(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.rate_limiters = build_auth_rate_limiters(settings)

    app.middleware("http")(logging_middleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Wildcard origins cannot be combined with credentials
    allow_all = settings.cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.add_api_route("/", root, methods=["GET"], include_in_schema=False)
    app.add_api_route("/health", health_check, methods=["GET"])
    app.include_router(auth.router)
    app.include_router(tasks.router)

    return app


app = create_app()


def run() -> None:
    """Serve the application on the configured host and port."""
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)
