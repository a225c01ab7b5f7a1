"""
Catalog cache on Redis
Misses and no-ops whenever Redis is disabled or unreachable
"""

import asyncio
import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

CATALOG_SCOPE = "catalog"


def version_key(scope: str) -> str:
    return f"quiz:version:{scope}"


def quiz_detail_key(quiz_id: str, version: int) -> str:
    return f"quiz:detail:{quiz_id}:v{version}"


def technologies_key(version: int) -> str:
    return f"quiz:technologies:v{version}"


class CacheManager:
    """
    Redis cache manager with automatic fallback

    A Redis error marks the manager disconnected; from then on every call
    is a miss until ``connect()`` succeeds again.

    Cached entries live under versioned keys. Invalidation bumps the
    version instead of deleting, so a reader that loaded a row before the
    bump can only write to a key that no later reader looks up.
    """

    def __init__(self, max_connection_attempts: int = 3, retry_delay: float = 1.0):
        self.redis_client: Optional[redis.Redis] = None
        self.connected = False
        self.max_connection_attempts = max_connection_attempts
        self.retry_delay = retry_delay

    async def connect(self) -> bool:
        """Connect to Redis if enabled; True when the cache is usable"""
        if not settings.REDIS_ENABLED:
            logger.info("Redis caching is disabled")
            return False
        if self.connected:
            return True

        for attempt in range(1, self.max_connection_attempts + 1):
            try:
                self.redis_client = redis.from_url(
                    settings.get_redis_url(),
                    max_connections=settings.REDIS_POOL_MAX_CONNECTIONS,
                    decode_responses=True,
                )
                await self.redis_client.ping()
                self.connected = True
                logger.info("Connected to Redis")
                return True
            except RedisError as e:
                logger.warning(f"Redis connection attempt {attempt}/{self.max_connection_attempts} failed: {e}")
                if attempt < self.max_connection_attempts:
                    await asyncio.sleep(self.retry_delay)

        logger.error("Redis unreachable, continuing without cache")
        return False

    async def disconnect(self) -> None:
        if self.redis_client:
            await self.redis_client.aclose()
            self.connected = False
            logger.info("Disconnected from Redis")

    def _fail(self, operation: str, target: Any, error: Exception) -> None:
        logger.error(f"Redis {operation} failed for {target}: {error}")
        self.connected = False

    async def get(self, key: str) -> Optional[Any]:
        """Decoded JSON value, or None on a miss"""
        if not self.connected:
            return None
        try:
            value = await self.redis_client.get(key)
        except RedisError as e:
            self._fail("get", key, e)
            return None
        if value is None:
            return None

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            await self.delete(key)
            return None

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """Store a JSON-serializable value for ``expire`` seconds (default CACHE_TTL)"""
        if not self.connected:
            return False
        try:
            await self.redis_client.setex(key, expire or settings.CACHE_TTL, json.dumps(value))
            return True
        except RedisError as e:
            self._fail("set", key, e)
            return False

    async def delete(self, *keys: str) -> bool:
        if not self.connected or not keys:
            return False
        try:
            await self.redis_client.delete(*keys)
            return True
        except RedisError as e:
            self._fail("delete", keys, e)
            return False

    async def get_version(self, scope: str) -> Optional[int]:
        """Current version for ``scope``; None means do not cache"""
        if not self.connected:
            return None
        try:
            value = await self.redis_client.get(version_key(scope))
        except RedisError as e:
            self._fail("get", version_key(scope), e)
            return None
        try:
            return int(value) if value is not None else 0
        except ValueError:
            logger.warning(f"Ignoring non-numeric cache version for {scope}")
            return None

    async def invalidate_quiz(self, quiz_id: str) -> bool:
        """Retire everything cached about a quiz after an admin write"""
        if not self.connected:
            return False
        try:
            await self.redis_client.incr(version_key(quiz_id))
            await self.redis_client.incr(version_key(CATALOG_SCOPE))
            return True
        except RedisError as e:
            self._fail("incr", quiz_id, e)
            return False


cache_manager = CacheManager()
