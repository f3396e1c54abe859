"""Access logging for the agenda API."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

QUIET_PATHS = ("/health",)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per agenda request, with its handling time.

    Health checks are passed through without logging. Server errors are
    logged at WARNING so they stand out from booking traffic; the error
    handlers log the cause.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"
        if request.url.path.startswith(QUIET_PATHS):
            return response

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s -> %d in %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
