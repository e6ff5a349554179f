"""
Notes Web — Request Logging Middleware
=======================================

What:  One access-log line for every HTTP request, written once the
       downstream call has finished, whether it returned or raised.
How:   Times the downstream call and logs request ID, method, path, status,
       duration, client address, and user agent under `notesweb.access`.
Who:   Applied to every request via Starlette middleware.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Log line:
    [1718000000123456789] GET /notes 200 3.2ms from 127.0.0.1 "curl/8.5.0"

A request whose handler raised is logged with status 500; the exception
itself keeps propagating to RequestIDMiddleware.

What we DON'T log: request bodies and query strings (note ids only live
in the query string, but the path alone is enough for access logs).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notesweb.middleware.request_id import request_id_var

logger = logging.getLogger("notesweb.access")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Writes the access line for each request after the response is known.

    Level follows the status class: 5xx → ERROR, 4xx → WARNING, else INFO.
    Health probes are skipped to keep the log readable.
    """

    def __init__(self, app, skip_paths=("/healthz",)) -> None:
        super().__init__(app)
        self.skip_paths = frozenset(skip_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.skip_paths:
            return await call_next(request)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            self._write_access_line(request, status, time.perf_counter() - started)

    def _write_access_line(self, request: Request, status: int, elapsed: float) -> None:
        fields = {
            "request_id": request_id_var.get("") or "unknown",
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": round(elapsed * 1000, 2),
            "client_ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
        }
        logger.log(
            _level_for(status),
            '[%(request_id)s] %(method)s %(path)s %(status)d %(duration_ms).1fms '
            'from %(client_ip)s "%(user_agent)s"',
            fields,
            extra=fields,
        )
