"""
Error Handlers
Maps API and search-layer exceptions onto the {"error": "<message>"} envelope.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..search.exceptions import SearchServiceError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


class APIError(Exception):
    """
    Error raised by a router with the message the client should see.

    details are logged server-side and never sent to the client.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
                 details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class InvalidRequestError(APIError):
    """400: missing query, bad filter, malformed vector action."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class SearchError(APIError):
    """500: embedding service or database failure."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _format_validation_error(exc: RequestValidationError) -> str:
    """One-line summary of FastAPI request validation errors."""
    parts = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", []) if part not in ("body", "query")]
        msg = str(error.get("msg", "invalid value"))
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def setup_error_handlers(app: FastAPI) -> None:
    """Register the error envelope handlers on app."""

    @app.exception_handler(APIError)
    async def handle_api_error(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc.message} {exc.details}")
        else:
            logger.warning(f"{request.url.path} rejected: {exc.message}")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(SearchServiceError)
    async def handle_search_error(request: Request, exc: SearchServiceError):
        # Search errors a router did not translate itself
        if isinstance(exc, ValidationError):
            logger.warning(f"{request.url.path} rejected: {exc.message}")
            return error_response(status.HTTP_400_BAD_REQUEST, exc.message)

        logger.error(f"{request.url.path} failed: {type(exc).__name__}: {exc.message}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _format_validation_error(exc)
        logger.warning(f"{request.url.path} invalid request: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)
