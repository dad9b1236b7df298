"""
Storage Module - Black Box Interface

Purpose: Own the Redis connection used by the redis session provider
Interface: connect(), disconnect()
Hidden: Redis specifics, connection pooling, response decoding

Can be replaced with any storage backend without affecting other modules.
"""

import logging
import os
from typing import Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class StorageModule:
    """Black box storage abstraction."""

    def __init__(self, connection_url: Optional[str] = None):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(self.url, encoding="utf-8", decode_responses=True)
            logger.info("Redis client created for session storage")
        return self._client

    async def disconnect(self) -> None:
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = ["StorageModule"]
