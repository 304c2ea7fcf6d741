"""
=============================================================================
LOGGING MIDDLEWARE
=============================================================================

Emits one access-log line per routed request on the ``tinyhttpd.access``
logger:

    127.0.0.1 "GET /echo/abc" 200 3 0.42ms
    ───┬───── ──────┬──────── ─┬─ ┬ ──┬───
       │            │          │  │   │
    Client     Method/Path Status │ Duration
                                 Body bytes

Nothing is added to the response, so identical requests keep producing
byte-identical responses.

=============================================================================
"""

import time
import logging
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse

logger = logging.getLogger("tinyhttpd.access")


@dataclass
class RequestLog:
    """Structured access-log entry for one request."""

    method: str
    path: str
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} "{self.method} {self.path}" '
            f'{self.status_code} {self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Should be FIRST in the pipeline so its timing covers everything and it
    logs the final response.
    """

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        log_entry = RequestLog(
            method=str(request.method),
            path=request.path,
            client_ip=request.client_address[0],
            status_code=int(response.status),
            content_length=response.content_length,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        logger.log(self.log_level, log_entry.to_text())

        return response
