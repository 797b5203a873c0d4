"""
Request Logging Middleware
Tags every request with an ID and logs its outcome.
"""

import logging
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Assigns request.state.request_id and logs one line per request.

    The ID comes from the X-Request-ID header when the caller sends one and
    is echoed back on the response. Responses with status >= 400 are logged
    at WARNING.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        logger.debug(f"[{request_id}] {route} started", extra={"query": request.url.query or None})

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(f"[{request_id}] {route} raised after {elapsed_ms:.2f}ms")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {route} -> {response.status_code} in {elapsed_ms:.2f}ms",
            extra={"client": request.client.host if request.client else None},
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
