import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, Optional

from redis.exceptions import RedisError

from ..errors import ProviderError
from .interfaces import MISSING

logger = logging.getLogger(__name__)


class RedisSession:
    """Session whose values live in a JSON document in Redis."""

    def __init__(self, provider: "RedisProvider", session_id: str):
        self._provider = provider
        self._session_id = session_id
        self._lock = asyncio.Lock()

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await self._provider._load_or_new(self._session_id, "set")
            data["values"][key] = value
            await self._provider._store(data, "set")

    async def get(self, key: str) -> Any:
        data = await self._provider._load(self._session_id, "get")
        if data is None:
            return MISSING
        return data["values"].get(key, MISSING)

    async def delete(self, key: str) -> None:
        async with self._lock:
            data = await self._provider._load(self._session_id, "delete")
            if data is None or key not in data["values"]:
                return
            del data["values"][key]
            await self._provider._store(data, "delete")

    def identifier(self) -> str:
        return self._session_id


class RedisProvider:
    def __init__(
        self,
        redis_client,
        key_prefix: str = "session:",
        active_key: str = "sessions:active",
        ttl: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize Redis provider.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            key_prefix: Prefix for session document keys
            active_key: Set holding the ids of live sessions
            ttl: Optional Redis-side expiry in seconds for session documents
            clock: Returns the current time in seconds
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.active_key = active_key
        self.ttl = ttl if ttl and ttl > 0 else None
        self._clock = clock

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    def _new_document(self, session_id: str) -> Dict[str, Any]:
        now = self._clock()
        return {
            "session_id": session_id,
            "values": {},
            "created_at": now,
            "last_access": now,
        }

    async def _load(self, session_id: str, operation: str) -> Optional[Dict[str, Any]]:
        try:
            raw = await self.redis.get(self._key(session_id))
        except RedisError as e:
            raise ProviderError(operation, f"Redis read failed: {e}", session_id) from e
        if raw is None:
            return None
        return self._decode(raw, session_id, operation)

    def _decode(self, raw: str, session_id: str, operation: str) -> Dict[str, Any]:
        try:
            return json.loads(raw)
        except ValueError as e:
            raise ProviderError(
                operation, f"Corrupt session document: {e}", session_id
            ) from e

    async def _load_or_new(self, session_id: str, operation: str) -> Dict[str, Any]:
        data = await self._load(session_id, operation)
        if data is None:
            data = self._new_document(session_id)
        data["last_access"] = self._clock()
        return data

    async def _store(self, data: Dict[str, Any], operation: str) -> None:
        session_id = data["session_id"]
        key = self._key(session_id)
        payload = json.dumps(data)
        try:
            if self.ttl:
                await self.redis.setex(key, self.ttl, payload)
            else:
                await self.redis.set(key, payload)
            await self.redis.sadd(self.active_key, session_id)
        except RedisError as e:
            raise ProviderError(operation, f"Redis write failed: {e}", session_id) from e

    async def session_init(self, session_id: str) -> RedisSession:
        await self._store(self._new_document(session_id), "init")
        return RedisSession(self, session_id)

    async def session_read(
        self, session_id: str, max_lifetime: Optional[int] = None
    ) -> RedisSession:
        """
        Load a session and refresh its last access.

        Logic:
        1. Fetch the JSON document
        2. Discard it if last_access + max_lifetime < now
        3. Create a fresh one if the key is missing or was discarded
        4. Stamp last_access and write it back (re-arms the TTL)
        """
        now = self._clock()
        data = await self._load(session_id, "read")
        if (
            data is not None
            and max_lifetime is not None
            and data["last_access"] + max_lifetime < now
        ):
            logger.debug(f"Replaced expired redis session {session_id[:8]}...")
            data = None
        if data is None:
            data = self._new_document(session_id)
        data["last_access"] = now
        await self._store(data, "read")
        return RedisSession(self, session_id)

    async def session_destroy(self, session_id: str) -> None:
        try:
            await self.redis.delete(self._key(session_id))
            await self.redis.srem(self.active_key, session_id)
        except RedisError as e:
            raise ProviderError("destroy", f"Redis delete failed: {e}", session_id) from e

    async def session_gc(self, max_lifetime: int) -> int:
        """
        Evict idle sessions and drop ids whose documents Redis already expired.

        Returns:
            Number of sessions removed
        """
        now = self._clock()
        removed = 0
        try:
            session_ids = await self.redis.smembers(self.active_key)
            for session_id in session_ids:
                raw = await self.redis.get(self._key(session_id))
                if raw is None:
                    await self.redis.srem(self.active_key, session_id)
                    logger.debug(f"Dropped vanished session {session_id[:8]}... from active set")
                    removed += 1
                    continue

                data = self._decode(raw, session_id, "gc")
                if data["last_access"] + max_lifetime < now:
                    await self.redis.delete(self._key(session_id))
                    await self.redis.srem(self.active_key, session_id)
                    removed += 1
        except RedisError as e:
            raise ProviderError("gc", f"Redis sweep failed: {e}") from e

        return removed
