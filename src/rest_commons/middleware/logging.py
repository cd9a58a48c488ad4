from __future__ import annotations

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from rest_commons.core.logging import ACCESS_LOGGER
from rest_commons.core.strings import shorten_left

logger = logging.getLogger(ACCESS_LOGGER)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one line per response.

    The request id is taken from ``header_name`` when the caller sends one
    and echoed back on the response. Request targets longer than
    ``trim_length`` are shortened (0 disables shortening).
    """

    def __init__(
        self,
        app,
        *,
        header_name: str = "X-Request-ID",
        enabled: bool = True,
        duration: bool = True,
        trim_length: int = 100,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.enabled = enabled
        self.duration = duration
        self.trim_length = trim_length

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        response.headers[self.header_name] = request_id

        if self.enabled:
            self._log(request, response, request_id, time.perf_counter() - start)
        return response

    def _log(self, request: Request, response: Response, request_id: str, elapsed: float) -> None:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        if self.trim_length > 0:
            target = shorten_left(target, self.trim_length)

        if self.duration:
            logger.info(
                "[%s] %s %s -> %d (%.1f ms)",
                request_id,
                request.method,
                target,
                response.status_code,
                elapsed * 1000,
            )
        else:
            logger.info("[%s] %s %s -> %d", request_id, request.method, target, response.status_code)
