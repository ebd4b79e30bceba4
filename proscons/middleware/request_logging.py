"""
Request logging middleware.
Logs method, path, status and latency for every handled request.
"""
import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    def __init__(self, app, ignore_paths: tuple = ()):
        super().__init__(app)
        self.ignore_paths = ignore_paths or ("/health", "/favicon.ico")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in self.ignore_paths or path.startswith("/static"):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        msg = "%s %s -> %d (%.2f ms)"
        args = (request.method, path, response.status_code, process_time * 1000)
        # Streamed bodies are still flowing here; the time covers provider selection only
        if response.status_code >= 500:
            logger.error(msg, *args)
        elif response.status_code >= 400:
            logger.warning(msg, *args)
        else:
            logger.info(msg, *args)

        response.headers["X-Process-Time"] = str(process_time)
        return response
