"""Custom FastAPI middlewares for observability."""
from __future__ import annotations

import logging
import time
from typing import Callable
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .monitoring import observe_request

logger = logging.getLogger("pixqr.http")

REQUEST_ID_HEADER = "X-Request-ID"


def route_path(request: Request) -> str:
    """Route template when matched, raw path otherwise (keeps metric labels bounded)."""

    route = request.scope.get("route")
    return route.path if route else request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log request metadata, latency and status codes; echo a request id."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.exception(
                "request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": route_path(request),
                    "duration_ms": round(duration_ms, 2),
                },
            )
            observe_request(request.method, route_path(request), 500, duration_ms)
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.INFO
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING

        path = route_path(request)
        logger.log(
            level,
            "request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "client": request.client.host if request.client else None,
                "duration_ms": round(duration_ms, 2),
            },
        )
        observe_request(request.method, path, response.status_code, duration_ms)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
