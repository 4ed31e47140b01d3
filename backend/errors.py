"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class StationRelayError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UpstreamFeedError(StationRelayError):
    """The station feed could not be fetched."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message, status_code=status_code)


class FeedFormatError(UpstreamFeedError):
    """The station feed was fetched but does not have the expected shape."""


class UpstreamTimeoutError(UpstreamFeedError):
    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(
            f"Station feed {url} did not respond within {timeout_seconds:g}s",
            status_code=504,
        )


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(_request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return PlainTextResponse("NOT FOUND", status_code=404)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(StationRelayError)
    async def handle_relay_error(_request: Request, exc: StationRelayError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
