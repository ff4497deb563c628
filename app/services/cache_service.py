"""
app/services/cache_service.py

Purpose: Cache-aside helper over Redis

- JSON get/set with optional TTL
- Key and pattern invalidation (SCAN + DEL)
- get_or_set: read through to a fetch coroutine on miss
- Redis failures are logged and never break a request
"""

import json
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Optional

from redis.exceptions import RedisError

from app.core.config import settings
from app.core.logging import get_logger
from app.db.redis import get_redis

logger = get_logger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class CacheService:
    """JSON cache over a shared Redis client."""

    def __init__(self, client_getter: Callable = get_redis, default_ttl: Optional[int] = None):
        self._client_getter = client_getter
        self.default_ttl = default_ttl or settings.CACHE_DEFAULT_TTL

    @property
    def client(self):
        return self._client_getter()

    async def get(self, key: str) -> Any:
        """Returns the decoded value or None on miss or error."""
        try:
            raw = await self.client.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except (RedisError, RuntimeError, ValueError) as e:
            logger.error(f"Cache get failed for key {key}: {e}", extra={"cache_key": key})
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            payload = json.dumps(value, default=_json_default)
            if ttl:
                await self.client.setex(key, ttl, payload)
            else:
                await self.client.set(key, payload)
            return True
        except (RedisError, RuntimeError, TypeError) as e:
            logger.error(f"Cache set failed for key {key}: {e}", extra={"cache_key": key})
            return False

    async def delete(self, key: str) -> bool:
        try:
            await self.client.delete(key)
            logger.debug("Cache key deleted", extra={"cache_key": key})
            return True
        except (RedisError, RuntimeError) as e:
            logger.error(f"Cache delete failed for key {key}: {e}", extra={"cache_key": key})
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """
        Deletes every key matching a glob pattern.

        Returns:
            Number of keys removed (0 on error)
        """
        try:
            keys = [key async for key in self.client.scan_iter(match=pattern, count=100)]
            if not keys:
                return 0
            removed = await self.client.delete(*keys)
            logger.debug(f"Cache pattern {pattern} removed {removed} keys", extra={"cache_key": pattern})
            return removed
        except (RedisError, RuntimeError) as e:
            logger.error(f"Cache delete_pattern failed for {pattern}: {e}", extra={"cache_key": pattern})
            return 0

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.client.exists(key))
        except (RedisError, RuntimeError) as e:
            logger.error(f"Cache exists failed for key {key}: {e}", extra={"cache_key": key})
            return False

    async def expire(self, key: str, ttl: int) -> bool:
        try:
            return bool(await self.client.expire(key, ttl))
        except (RedisError, RuntimeError) as e:
            logger.error(f"Cache expire failed for key {key}: {e}", extra={"cache_key": key})
            return False

    async def flush_all(self) -> bool:
        try:
            await self.client.flushdb()
            logger.warning("Cache flushed")
            return True
        except (RedisError, RuntimeError) as e:
            logger.error(f"Cache flush failed: {e}")
            return False

    async def get_or_set(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """
        Returns the cached value for key, or awaits fetch() and caches its result.

        A cached null is treated as a miss. Concurrent misses each call fetch().
        """
        cached = await self.get(key)
        if cached is not None:
            logger.debug("Cache hit", extra={"cache_key": key})
            return cached

        logger.debug("Cache miss", extra={"cache_key": key})
        value = await fetch()
        if value is not None:
            await self.set(key, value, ttl or self.default_ttl)
        return value


# Global service instance
_cache_service: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get or create cache service instance."""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService()
    return _cache_service
