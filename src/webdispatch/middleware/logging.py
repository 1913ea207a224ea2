"""
=============================================================================
ACCESS LOGGING MIDDLEWARE
=============================================================================

Writes one access log line per request, after the response has been built.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ 10.0.0.7 - - [10/Jun/2024:10:55:36 +0000] "GET /files/a.pdf" 200 4ms│
    │ ───────────────────────────────────────────────────────────────────│
    │ IP          Timestamp                    Method/Path    Status Time │
    └─────────────────────────────────────────────────────────────────────┘

Lines go to the "webdispatch.access" logger so they can be routed apart
from the diagnostic logs:

    logging.getLogger("webdispatch.access").addHandler(file_handler)

Put this middleware outermost so the timing covers everything inside it
and requests answered by an IPFilter rule are logged too.

=============================================================================
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from .base import App, Middleware


logger = logging.getLogger("webdispatch.access")


@dataclass
class RequestLog:
    """One access log entry."""

    client_ip: str
    method: str
    path: str
    status_code: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware.

    Args:
        app: The wrapped application.
        log_level: Level the access lines are logged at.
        skip_paths: Exact paths that are never logged (e.g. ["/health"]).
    """

    def __init__(
        self,
        app: App,
        log_level: int = logging.INFO,
        skip_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        start_time = time.perf_counter()

        try:
            response = HTTPResponse.coerce(self.app(request))
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            client_ip=request.client_ip,
            method=request.method,
            path=request.path or "",
            status_code=int(response.status),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )
        logger.log(self.log_level, entry.to_text())

        return response
