"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ForecastError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class UnknownTopicError(ForecastError):
    def __init__(self, sign: str, accepted: list[str]):
        super().__init__(
            f"Invalid sunsign: {sign}. Accepted values: {', '.join(accepted)}",
            status_code=404,
        )
        self.sign = sign


class FetchError(ForecastError):
    """Retrieving or parsing the source document failed."""

    def __init__(self, message: str, url: str):
        super().__init__(message, status_code=502)
        self.url = url


class SourceConnectionError(FetchError):
    def __init__(self, url: str):
        super().__init__(f"error connecting with {url}", url)


class ParseError(FetchError):
    def __init__(self, url: str):
        super().__init__(f"error parsing the html from {url}", url)


class ResolutionError(ForecastError):
    """A live fetch for a sign failed; the cause is kept on ``cause``."""

    def __init__(self, sign: str, cause: FetchError):
        super().__init__(f"Could not resolve forecast for {sign}: {cause}", status_code=502)
        self.sign = sign
        self.cause = cause


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(ForecastError)
    async def handle_forecast_error(_request: Request, exc: ForecastError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
        )
