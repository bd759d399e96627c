from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from timetable.core.config import Settings

logger = logging.getLogger("timetable.requests")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its outcome and duration."""

    def __init__(self, app, *, slow_threshold_ms: int) -> None:
        super().__init__(app)
        self._slow_threshold_ms = slow_threshold_ms

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        level = logging.WARNING if elapsed_ms >= self._slow_threshold_ms else logging.INFO
        logger.log(
            level,
            "%s %s -> %s in %.1fms [%s]",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, settings: Settings) -> None:
        super().__init__(app)
        self._hsts_value: str | None = None
        if settings.security_enable_hsts:
            self._hsts_value = f"max-age={max(1, settings.security_hsts_max_age_seconds)}; includeSubDomains"

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        headers = response.headers
        headers.setdefault("X-Content-Type-Options", "nosniff")
        headers.setdefault("X-Frame-Options", "DENY")
        headers.setdefault("Referrer-Policy", "no-referrer")
        if self._hsts_value:
            headers.setdefault("Strict-Transport-Security", self._hsts_value)
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject uploads whose declared length exceeds ``max_bytes`` with 413."""

    def __init__(self, app, *, max_bytes: int) -> None:
        super().__init__(app)
        self._max_bytes = max(1, max_bytes)

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = request.headers.get("content-length", "")
        size = int(declared) if declared.isdigit() else 0
        if size <= self._max_bytes:
            return await call_next(request)
        logger.warning("Rejected %s %s: body of %s bytes", request.method, request.url.path, size)
        return JSONResponse(
            status_code=413,
            content={
                "message": "Request body too large",
                "details": {"size": size, "max_size": self._max_bytes},
            },
        )
