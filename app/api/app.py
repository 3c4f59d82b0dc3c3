"""API application factory."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import get_logger, request_id_var, subscriber_var
from app.schemas.common import ErrorResponse

from .routes import coverage, dashboards, feed, health


logger = get_logger("api")

# Probes hit these every few seconds
_QUIET_PATHS = ("/health",)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the content store engine on startup and dispose it on shutdown."""
    from app.database.connection import close_sqlalchemy_engine, init_sqlalchemy_engine

    try:
        await init_sqlalchemy_engine()
    except Exception as e:
        logger.warning(f"Content store unavailable at startup: {e}")

    yield

    try:
        await close_sqlalchemy_engine()
    except Exception as e:
        logger.warning(f"Engine dispose failed: {e}")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and reset per-request logging context."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        request_id_var.set(request_id)
        subscriber_var.set(None)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; feeds are personal so never cached."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.monotonic()
        response = await call_next(request)
        duration = time.monotonic() - start_time

        path = request.url.path
        if path.startswith("/feed"):
            response.headers["Cache-Control"] = "private, no-store"

        # Path only; query strings carry usernames
        log = logger.debug if path.startswith(_QUIET_PATHS) else logger.info
        log(
            f"{request.method} {path} -> {response.status_code} ({duration:.3f}s)",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration * 1000),
            },
        )
        return response


def create_api_app() -> FastAPI:
    """Create and configure the API application."""
    expose_docs = settings.debug or settings.is_development
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Analyst content feeds and stock coverage",
        root_path=settings.root_path,
        docs_url="/docs" if expose_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if expose_docs else None,
        lifespan=lifespan,
        responses={
            400: {"model": ErrorResponse, "description": "Bad Request"},
            401: {"model": ErrorResponse, "description": "Unauthorized"},
            404: {"model": ErrorResponse, "description": "Not Found"},
            500: {"model": ErrorResponse, "description": "Internal Server Error"},
        },
    )

    # First added is innermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(feed.router)
    app.include_router(coverage.router)
    app.include_router(dashboards.router)

    return app
