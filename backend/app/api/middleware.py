"""Request-scoped middleware: request ids and access logging."""
from __future__ import annotations

import logging
from time import perf_counter
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("app.access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign ``request.state.request_id`` and log one line per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "500 - %.2fms %s %s %s",
                (perf_counter() - start) * 1000,
                request.method,
                request.url.path,
                request_id,
            )
            raise
        latency_ms = (perf_counter() - start) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "%s - %.2fms %s %s %s",
            response.status_code,
            latency_ms,
            request.method,
            request.url.path,
            request_id,
        )
        return response
