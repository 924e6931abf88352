"""Maps registry failures onto HTTP responses.

  NotFoundError       → 404
  UnauthorizedError   → 403
  InvalidInputError   → 422
  StateConflictError  → 409

The body carries the stable error ``code`` next to the message so
clients can branch on it without parsing text.
"""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from carbon_registry.core.metrics import LEDGER_REJECTIONS
from carbon_registry.services.errors import (
    InvalidInputError,
    NotFoundError,
    RegistryError,
    StateConflictError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: tuple[tuple[type[RegistryError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidInputError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StateConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: RegistryError) -> int:
    for kind, code in _STATUS_BY_KIND:
        if isinstance(exc, kind):
            return code
    return status.HTTP_400_BAD_REQUEST


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    status_code = status_for(exc)
    LEDGER_REJECTIONS.labels(code=exc.code).inc()
    logger.warning(
        "Rejected %s %s code=%s status=%d: %s",
        request.method,
        request.url.path,
        exc.code,
        status_code,
        exc,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.code},
    )
