"""
Redis JSON Cache
Kleiner Cache-Layer über redis.asyncio. Ohne REDIS_URL ist jede Operation ein No-op.
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError


class RedisCache:
    """JSON-Cache mit TTL und Prefix-Invalidierung"""

    def __init__(self, redis_url: Optional[str], namespace: str = "kickoffhub"):
        self.redis_url = redis_url
        self.namespace = namespace
        self.client = redis.from_url(redis_url) if redis_url else None
        self.logger = logging.getLogger("cache")

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Any:
        if not self.client:
            return None
        try:
            raw = await self.client.get(self._key(key))
        except RedisError as e:
            # Cache-Fehler dürfen Requests nicht abbrechen
            self.logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            self.logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        if not self.client:
            return
        try:
            await self.client.set(self._key(key), json.dumps(value, default=str), ex=ttl)
        except RedisError as e:
            self.logger.warning(f"Cache write failed for {key}: {e}")

    async def delete_prefix(self, prefix: str) -> int:
        """Löscht alle Keys, die mit ``prefix`` beginnen; gibt die Anzahl zurück"""
        if not self.client:
            return 0
        deleted = 0
        try:
            async for key in self.client.scan_iter(match=f"{self._key(prefix)}*"):
                deleted += await self.client.delete(key)
        except RedisError as e:
            self.logger.warning(f"Cache invalidation failed for {prefix}: {e}")
        return deleted

    async def ping(self) -> bool:
        if not self.client:
            return False
        return bool(await self.client.ping())

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None
