from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from carbon_registry.api.accounts import router as accounts_router
from carbon_registry.api.batches import router as batches_router
from carbon_registry.api.errors import registry_error_handler
from carbon_registry.api.health import router as health_router
from carbon_registry.api.holdings import router as holdings_router
from carbon_registry.api.metrics_endpoint import router as metrics_router
from carbon_registry.api.projects import router as projects_router
from carbon_registry.api.retirements import router as retirements_router
from carbon_registry.api.verifiers import router as verifiers_router
from carbon_registry.core.config import SETTINGS
from carbon_registry.core.logging import setup_logging
from carbon_registry.db.engine import lifespan_db
from carbon_registry.db.redis import lifespan_redis
from carbon_registry.middleware.metrics import MetricsMiddleware
from carbon_registry.middleware.request_context import (
    RequestContextMiddleware,
    attach_context_filter,
)
from carbon_registry.services.errors import RegistryError

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
attach_context_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Nested so teardown runs in reverse order.
    async with lifespan_db():
        async with lifespan_redis():
            yield


app = FastAPI(
    title="carbon-registry",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# Last-added runs first: RequestContext (outermost) → Metrics → route
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(RegistryError, registry_error_handler)  # type: ignore[arg-type]

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(projects_router)
app.include_router(verifiers_router)
app.include_router(batches_router)
app.include_router(holdings_router)
app.include_router(retirements_router)
app.include_router(accounts_router)

if not SETTINGS.admin_accounts:
    logger.warning("ADMIN_ACCOUNTS is empty; admin-gated operations will be rejected")

logger.info(
    "carbon-registry started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
