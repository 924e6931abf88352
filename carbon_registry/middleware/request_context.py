"""Request context middleware: request ids, timing, and log enrichment.

Every request gets an id (the client's ``X-Request-ID`` or a fresh UUID)
stored in a ContextVar. A root-logger filter copies it, along with the
authenticated caller once ``require_user`` has resolved one, onto every
LogRecord emitted while serving the request. That way a rejected
purchase logged deep inside the CreditLedger can still be tied back to
the HTTP call and account that caused it.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
caller_var: ContextVar[str | None] = ContextVar("caller", default=None)


class _RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        if not hasattr(record, "caller"):
            record.caller = caller_var.get(None)  # type: ignore[attr-defined]
        return True


def attach_context_filter() -> None:
    """Install the context filter on the root logger and its handlers.

    Logger filters only see records logged on that logger, so records
    propagating up from child loggers pick the fields up at the handler.
    Call after setup_logging has replaced the root handlers.
    """
    root = logging.getLogger()
    for target in (root, *root.handlers):
        if not any(isinstance(f, _RequestContextFilter) for f in target.filters):
            target.addFilter(_RequestContextFilter())


attach_context_filter()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request id, time the request, and log one summary line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
