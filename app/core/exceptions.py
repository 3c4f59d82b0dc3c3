"""Service errors and the handlers that turn them into responses.

Error bodies follow ``ErrorResponse``: ``{"error", "message", "status"}``
plus optional ``details``. ``NoContentError`` is the exception: it becomes
an empty 204 so clients can tell "nothing to show" apart from a failure.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse


logger = logging.getLogger("analystfeed.error")


class AppException(Exception):
    """Base class; subclasses pin the status and error code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.status_code = status_code or self.status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
            "status": self.status_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class NotFoundError(AppException):
    """Unknown analyst, subscriber or dashboard."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    message = "Resource not found"


class NoContentError(AppException):
    """Valid request with nothing to show: no subscriptions or no content."""

    status_code = status.HTTP_204_NO_CONTENT
    error_code = "NO_CONTENT"
    message = "No content"


class BadRequestError(AppException):
    """Malformed parameter, such as an unknown timezone."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"
    message = "Bad request"


class AuthenticationError(AppException):
    """Missing, expired or invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_FAILED"
    message = "Authentication required"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def register_exception_handlers(app: FastAPI) -> None:
    """Map ``AppException`` subclasses and unexpected errors to responses."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> Response:
        headers = {"X-Request-ID": _request_id(request)}
        if exc.status_code == status.HTTP_204_NO_CONTENT:
            logger.debug(f"{request.url.path}: {exc.message}")
            return Response(status_code=exc.status_code, headers=headers)
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method},
        )

        from .config import settings

        message = str(exc) if settings.debug else AppException.message
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": AppException.error_code, "message": message, "status": 500},
            headers={"X-Request-ID": _request_id(request)},
        )
