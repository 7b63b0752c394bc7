"""Middleware that logs every request made to the account routes.

Logs method, path, status code, duration and the authenticated subject.
The subject is read from ``request.state.user``, which is set by
``get_current_user()`` in ``middleware/auth.py``.
"""

from __future__ import annotations

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request under the configured path prefixes."""

    def __init__(self, app, prefixes: list[str]) -> None:
        super().__init__(app)
        self.prefixes = prefixes

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if not any(path.startswith(p) for p in self.prefixes):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        user_info = getattr(request.state, "user", None)
        logger.info(
            "%s %s -> %s (%.1f ms) user=%s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            user_info["sub"] if user_info else "-",
        )
        return response
