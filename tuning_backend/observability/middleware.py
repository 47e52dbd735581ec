"""
FastAPI middleware for observability.

Correlation ID propagation and one access log line per request.

Dependencies: fastapi, starlette, tuning_backend.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from tuning_backend.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
USER_HEADER = "X-User-Id"

# Probes are polled constantly; their access lines go to DEBUG
QUIET_PATH_PREFIXES = ("/api/v1/health",)


def _level_for(path: str, status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if path.startswith(QUIET_PATH_PREFIXES):
        return logging.DEBUG
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once it completes, with status, caller and timing."""

    async def dispatch(self, request: Request, call_next):
        """
        Time the request and log its outcome.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response object
        """
        started = time.perf_counter()
        method = request.method
        path = request.url.path
        context = {
            "method": method,
            "path": path,
            "user_id": request.headers.get(USER_HEADER, "-"),
            "client_host": request.client.host if request.client else None,
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - unhandled {type(e).__name__}",
                extra={
                    **context,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "error_type": type(e).__name__,
                },
            )
            raise

        logger.log(
            _level_for(path, response.status_code),
            f"{method} {path} - {response.status_code}",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation ID injection."""

    async def dispatch(self, request: Request, call_next):
        """
        Bind the caller's correlation ID (or a new one) for the request.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: Response with correlation ID header
        """
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
