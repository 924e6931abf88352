"""Liveness and readiness endpoints.

/health answers as long as the process can serve requests and reports
the state of each backing service. It stays 200 when a dependency is
degraded so an orchestrator does not restart a registry that is still
serving reads from memory.

/ready returns 503 while a configured dependency is unreachable, which
takes the instance out of the load balancer without restarting it.
"""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from carbon_registry.db import engine as db_engine
from carbon_registry.db.redis import redis_pool

router = APIRouter(tags=["health"])


async def _dependency_checks() -> dict[str, str]:
    checks: dict[str, str] = {}

    if redis_pool is not None:
        try:
            await redis_pool.ping()  # type: ignore[misc]
            checks["redis"] = "ok"
        except Exception:
            checks["redis"] = "degraded"
    else:
        checks["redis"] = "not_configured"

    if db_engine.engine is not None:
        checks["database"] = "ok" if await db_engine.ping_db() else "degraded"
    else:
        checks["database"] = "not_configured"

    return checks


@router.get("/health")
async def health() -> dict:
    checks = await _dependency_checks()
    overall = "degraded" if "degraded" in checks.values() else "ok"
    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready(response: Response) -> dict:
    checks = await _dependency_checks()
    if "degraded" in checks.values():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"ready": False, "checks": checks}
    return {"ready": True, "checks": checks}
