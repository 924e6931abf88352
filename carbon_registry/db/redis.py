from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from carbon_registry.core.config import SETTINGS

logger = logging.getLogger(__name__)

# None when REDIS_URL is unset; consumers fall back to in-memory backends.
if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,
        max_connections=20,
    )
else:
    redis_pool = None


@asynccontextmanager
async def lifespan_redis():
    """Verify Redis on startup and close the pool on shutdown.

    A failed ping is logged, not raised: the service still starts and
    rate limiting keeps working per process.
    """
    if redis_pool is None:
        logger.info("No REDIS_URL configured, rate limiting is per process")
        yield
        return

    try:
        await redis_pool.ping()  # type: ignore[misc]
        logger.info("Redis connected: %s", SETTINGS.redis_url)
    except Exception:
        logger.exception("Redis connection failed on startup")
        yield
        return

    yield

    await redis_pool.aclose()
    logger.info("Redis connection pool closed")
