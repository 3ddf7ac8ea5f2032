"""ASGI middleware for request logging, forced statuses and simulated latency."""

from __future__ import annotations

import asyncio
import logging
import random
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

STATUS_OVERRIDE_HEADER = "x-mock-status"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("[REQUEST] %s %s %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response


def parse_forced_status(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        status_code = int(value.strip())
    except ValueError:
        return None
    if 100 <= status_code < 600:
        return status_code
    return None


class StatusOverrideMiddleware(BaseHTTPMiddleware):
    """Stores a status forced through ``x-mock-status`` on ``request.state.forced_status``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        raw = request.headers.get(STATUS_OVERRIDE_HEADER)
        forced = parse_forced_status(raw)
        if raw is not None and forced is None:
            logger.warning("Invalid %s header: %s", STATUS_OVERRIDE_HEADER, raw)
        elif forced is not None:
            logger.debug("Status override: %d for %s %s", forced, request.method, request.url.path)
        request.state.forced_status = forced
        return await call_next(request)


class LatencyMiddleware(BaseHTTPMiddleware):
    """Delays every request by a uniform random amount within ``[min_ms, max_ms]``."""

    def __init__(self, app: ASGIApp, min_ms: int, max_ms: int) -> None:
        super().__init__(app)
        self.min_ms = min_ms
        self.max_ms = max_ms

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        delay_ms = random.randint(self.min_ms, self.max_ms)
        logger.debug("Simulating latency: %dms for %s %s", delay_ms, request.method, request.url.path)
        await asyncio.sleep(delay_ms / 1000)
        return await call_next(request)
