"""Process time middleware.

Reports how long each request took in ``X-Process-Time`` (seconds) and logs every
request with its status and duration.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sufra.core.logging import get_logger

_log = get_logger(__name__)

SLOW_REQUEST_SECONDS = 2.0


class ProcessTimeMiddleware(BaseHTTPMiddleware):
    """Time requests and log them."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        response.headers["X-Process-Time"] = f"{elapsed:.6f}"

        log = _log.warning if elapsed >= SLOW_REQUEST_SECONDS else _log.info
        log(
            "{} {} -> {} in {:.1f} ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed * 1000,
        )
        return response
