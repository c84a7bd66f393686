# ============================================================================
# FILE: audiovault/middleware/request_logging.py
# ============================================================================
import time
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
import logging

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request plus an X-Process-Time header"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(f"Slow request: {method} {path} -> {response.status_code} in {duration_ms:.2f}ms")
        else:
            logger.info(f"{method} {path} -> {response.status_code} in {duration_ms:.2f}ms")
        return response
