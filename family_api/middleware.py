"""Request logging middleware.

Logs one line per request: method, path, status and elapsed milliseconds.
Requests that raise past the app's handlers are logged with a traceback
and re-raised.
"""

from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("family_api.access")

# Paths polled by load balancers; logged at DEBUG to keep the log readable.
_QUIET_PATHS = frozenset({"/api/health"})


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log.exception("%s %s failed after %.1fms", request.method, request.url.path, elapsed_ms)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.DEBUG if request.url.path in _QUIET_PATHS else logging.INFO
        log.log(level, "%s %s -> %s (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
