"""
Request middleware: correlation ids and access logging.

Every request gets an ``X-Request-ID`` (taken from the caller when present)
that is bound into the structlog context, so planner and deploy logs emitted
while serving it carry the same id.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from greenops.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes and scrapes are not access-logged
QUIET_PATHS = frozenset({"/health", "/health/live", "/api/health", "/metrics"})


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Propagate or mint a request id and bind it for logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


async def request_timing_middleware(request: Request, call_next: Callable) -> Response:
    """Add X-Response-Time and log non-probe requests; 5xx logs as error."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"

    if request.url.path in QUIET_PATHS:
        return response

    log = logger.error if response.status_code >= 500 else logger.info
    log(
        "Request served",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=elapsed_ms,
        request_id=getattr(request.state, "request_id", None),
    )
    return response
