from __future__ import annotations

import logging

import jwt as pyjwt
from fastapi import HTTPException, Request, status

from carbon_registry.core.metrics import RATE_LIMIT_HITS
from carbon_registry.db.redis import redis_pool
from carbon_registry.services.rate_limiter import (
    InMemoryRateLimiter,
    RateLimitConfig,
    RateLimiter,
    RedisRateLimiter,
)

logger = logging.getLogger(__name__)

_rate_limiter: RateLimiter
if redis_pool is not None:
    _rate_limiter = RedisRateLimiter(redis_pool)
else:
    _rate_limiter = InMemoryRateLimiter()

WRITE_LIMIT = RateLimitConfig()


def require_rate_limit(config: RateLimitConfig = WRITE_LIMIT):
    """Dependency factory: spend one token from the caller's bucket."""

    async def _check(request: Request) -> None:
        key = _build_key(request)
        result = await _rate_limiter.check(key, config)
        if not result.allowed:
            RATE_LIMIT_HITS.labels(
                key_type="caller" if key.startswith("caller:") else "ip"
            ).inc()
            logger.warning("Rate limit exceeded key=%s", key)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Rate limit exceeded",
                headers={
                    "Retry-After": str(int(result.retry_after) + 1),
                    "X-RateLimit-Limit": str(result.limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

    return _check


def _build_key(request: Request) -> str:
    """Key the bucket by the token's ``sub`` without verifying it.

    A forged token only earns its own bucket; require_user still rejects it.
    """
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        try:
            claims = pyjwt.decode(auth_header[7:], options={"verify_signature": False})
        except pyjwt.InvalidTokenError:
            claims = {}
        sub = claims.get("sub")
        if sub:
            return f"caller:{sub}"

    client_ip = request.client.host if request.client else "unknown"
    return f"ip:{client_ip}"
