import logging
import time
from typing import Callable

from cachetools import TLRUCache
from redis.asyncio import Redis, RedisError

from tasklist.cache.base import SnapshotCache
from tasklist.core.config import Settings, get_settings
from tasklist.exceptions import CacheError

logger = logging.getLogger(__name__)


class RedisCache:
    """
    Redis-backed snapshot cache.

    Unlike a best-effort cache, every Redis failure is raised as CacheError:
    a failed lookup is not turned into a miss, and a failed eviction is not
    swallowed.
    """

    def __init__(self, settings: Settings | None = None, redis: Redis | None = None):
        self._settings = settings
        self._redis = redis
        self._initialized = redis is not None

    async def init_cache(self):
        """Open the Redis connection pool and verify it with PING."""
        if self._initialized:
            return

        if self._settings is None:
            self._settings = get_settings()
        settings = self._settings

        self._redis = Redis.from_url(
            settings.redis_dsn,
            max_connections=settings.redis_pool_size,
            socket_connect_timeout=settings.redis_connect_timeout,
            socket_keepalive=True,
            health_check_interval=30,
        )

        try:
            await self._redis.ping()
        except RedisError as e:
            logger.error(f"Redis initialization failed: {e}")
            await self._redis.aclose()
            self._redis = None
            raise CacheError("init", "*", "Cache unavailable") from e

        self._initialized = True
        logger.info("Redis connection established")

    def _key(self, key: str) -> str:
        namespace = self._settings.cache_namespace if self._settings else ""
        return f"{namespace}{key}"

    async def get(self, key: str) -> bytes | None:
        await self.init_cache()
        try:
            return await self._redis.get(self._key(key))
        except RedisError as e:
            logger.error(f"Redis GET error on {key}: {e}")
            raise CacheError("get", key) from e

    async def set_with_expiry(self, key: str, value: bytes, ttl_seconds: int):
        await self.init_cache()
        try:
            await self._redis.set(self._key(key), value, ex=ttl_seconds)
            logger.debug(f"Stored {key} with ttl={ttl_seconds}s")
        except RedisError as e:
            logger.error(f"Redis SET error on {key}: {e}")
            raise CacheError("set", key) from e

    async def delete(self, key: str):
        """Remove ``key``; DEL on a missing key is a no-op in Redis."""
        await self.init_cache()
        try:
            await self._redis.delete(self._key(key))
            logger.debug(f"Deleted {key}")
        except RedisError as e:
            logger.error(f"Redis DELETE error on {key}: {e}")
            raise CacheError("delete", key) from e

    async def ping(self):
        await self.init_cache()
        try:
            await self._redis.ping()
        except RedisError as e:
            raise CacheError("ping", "*", "Cache unavailable") from e

    async def close(self):
        """Graceful shutdown of cache connections."""
        if self._redis:
            try:
                await self._redis.aclose()
                logger.info("Redis connection closed")
            except RedisError as e:
                logger.error(f"Error closing Redis: {e}")
        self._redis = None
        self._initialized = False


class MemoryCache:
    """
    Process-local snapshot cache for single-worker deployments and tests.

    Each entry expires ``ttl_seconds`` after it was written, measured on
    ``timer`` (monotonic by default).
    """

    def __init__(self, maxsize: int = 128, timer: Callable[[], float] = time.monotonic):
        self._entries = TLRUCache(maxsize=maxsize, ttu=self._expires_at, timer=timer)

    @staticmethod
    def _expires_at(key, value, now):
        _, ttl_seconds = value
        return now + ttl_seconds

    async def init_cache(self):
        return None

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry[0]

    async def set_with_expiry(self, key: str, value: bytes, ttl_seconds: int):
        self._entries[key] = (value, ttl_seconds)

    async def delete(self, key: str):
        self._entries.pop(key, None)

    async def ping(self):
        return None

    async def close(self):
        self._entries.clear()


def build_cache(settings: Settings) -> SnapshotCache:
    if settings.cache_backend == "memory":
        logger.info("Using in-process snapshot cache")
        return MemoryCache(maxsize=settings.memory_cache_maxsize)
    return RedisCache(settings)


# Cache instance (singleton per worker)
cache_layer: SnapshotCache = build_cache(get_settings())
