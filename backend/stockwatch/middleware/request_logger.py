# backend/stockwatch/middleware/request_logger.py
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from stockwatch.logger import get_logger

log = get_logger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """One log line per request; server errors are logged at WARNING."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            ms = int((time.perf_counter() - start) * 1000)
            client = request.client.host if request.client else "-"
            level = logging.WARNING if status >= 500 else logging.INFO
            log.log(level, "%s %s from %s -> %s %dms", request.method, request.url.path, client, status, ms)
