"""Redis cache of record destinations for id-based resolution."""

import logging
from typing import Optional

import redis.asyncio as redis


class RedisCache:
    """Redis cache mapping record ids to destination URLs.

    Every cache failure is logged and treated as a miss; the record store stays
    the source of truth.
    """

    KEY_PREFIX = "qrlink:destination:"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis cache.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            ttl_seconds: TTL for cached destinations
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = redis_url is not None
        self.client: Optional[redis.Redis] = None

        if self.enabled:
            self.logger.info(f"Redis cache enabled with TTL={ttl_seconds}s")

    async def connect(self) -> None:
        """Connect to Redis; disables the cache if unreachable."""
        if not self.enabled:
            return

        try:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            await self.client.ping()
            self.logger.info("Connected to Redis")
        except Exception as e:
            self.logger.error(f"Failed to connect to Redis: {e}")
            self.enabled = False

    def get_cache_key(self, record_id: str) -> str:
        return f"{self.KEY_PREFIX}{record_id}"

    async def get_destination(self, record_id: str) -> Optional[str]:
        if not self.enabled or not self.client:
            return None

        try:
            return await self.client.get(self.get_cache_key(record_id))
        except Exception as e:
            self.logger.error(f"Cache get error: {e}")
            return None

    async def set_destination(self, record_id: str, destination_url: str) -> bool:
        if not self.enabled or not self.client:
            return False

        try:
            await self.client.setex(self.get_cache_key(record_id), self.ttl_seconds, destination_url)
            return True
        except Exception as e:
            self.logger.error(f"Cache set error: {e}")
            return False

    async def invalidate(self, record_id: str) -> bool:
        """Drop a cached destination. Missing keys are not an error."""
        if not self.enabled or not self.client:
            return False

        try:
            return await self.client.delete(self.get_cache_key(record_id)) > 0
        except Exception as e:
            self.logger.error(f"Cache delete error: {e}")
            return False

    async def ping(self) -> bool:
        if not self.enabled or not self.client:
            return True

        try:
            await self.client.ping()
            return True
        except Exception as e:
            self.logger.error(f"Cache ping failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.logger.info("Redis connection closed")
