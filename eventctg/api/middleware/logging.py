"""Request/response logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from eventctg.utils.monitoring import http_requests_in_flight, observe_request

logger = logging.getLogger("eventctg.api")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Structured logging and metrics for inbound HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        http_requests_in_flight.inc()
        try:
            response = await call_next(request)
        finally:
            http_requests_in_flight.dec()
        duration = time.perf_counter() - start_time

        route = request.scope.get("route")
        route_path = getattr(route, "path", "unmatched")
        observe_request(request.method, route_path, response.status_code, duration)

        logger.info(
            "request.completed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": round(duration * 1000, 2),
                "client": request.client.host if request.client else None,
            },
        )

        return response
