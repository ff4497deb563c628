"""
app/db/redis.py

Purpose: Redis connection setup for the cache layer

- Creates a shared asyncio Redis client
- Ping on startup, close on shutdown
- The application keeps serving if Redis is down (cache misses only)
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

_redis: Optional[redis.Redis] = None


async def connect_to_redis():
    """
    Creates the Redis client and verifies connectivity.
    A failed ping is logged, not raised.
    """
    global _redis

    if _redis is not None:
        logger.warning("Redis client already initialized")
        return

    _redis = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
    )

    try:
        await _redis.ping()
        logger.info("✅ Successfully connected to Redis")
    except RedisError as e:
        logger.warning(f"⚠️ Redis not reachable, cache disabled until it recovers: {e}")


async def close_redis_connection():
    """Closes the Redis client."""
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None
        logger.info("Redis connection closed")


async def check_redis_health() -> bool:
    try:
        if _redis is None:
            return False
        return bool(await _redis.ping())
    except RedisError as e:
        logger.error(f"Redis health check failed: {str(e)}")
        return False


def get_redis() -> redis.Redis:
    """
    Returns the shared Redis client.

    Raises:
        RuntimeError: If Redis is not initialized
    """
    if _redis is None:
        raise RuntimeError(
            "Redis not initialized. Call connect_to_redis() during startup."
        )
    return _redis
