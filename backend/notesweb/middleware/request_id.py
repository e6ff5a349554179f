"""
Notes Web — Request ID Middleware
==================================

What:  Tags each request with an ID and echoes it in the response headers.
How:   Reuses the client's X-Request-Id when present, otherwise asks the
       injected id factory for a new one. The ID lives in a ContextVar (for
       loggers) and in request.state (for handlers).
Who:   Applied to every request via Starlette middleware.
When:  Outermost of the app's own middleware, so the access log sees the ID.

Default ID format:
    A nanosecond wall-clock timestamp rendered as decimal text, e.g.
    "1718000000123456789". Any zero-argument callable returning a string
    can replace it.
"""

import logging
import time
from contextvars import ContextVar
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def next_request_id() -> str:
    return str(time.time_ns())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client-provided header value if it is non-empty
        2. Otherwise generate one with `id_factory`
        3. Store it in the ContextVar and in request.state.request_id
        4. Add it to the response headers, including on the plain-text 500
           returned when a handler raises something no exception handler
           turned into a response
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Request-Id",
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.id_factory = id_factory or next_request_id

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(self.header_name) or self.id_factory()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("[%s] Unhandled error on %s %s", rid, request.method, request.url.path)
            response = PlainTextResponse("error: an unexpected error occurred", status_code=500)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = rid
        return response


class RequestIDLogFilter(logging.Filter):
    """
    Copies the current request ID onto every log record as `request_id`.

    Records emitted outside a request get "-", so the log format string can
    always reference %(request_id)s.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("") or "-"
        return True
