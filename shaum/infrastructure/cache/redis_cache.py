"""
Redis cache wrapper for remote calendar months.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

from shaum.infrastructure.calendar.types import LookupKey

logger = logging.getLogger(__name__)


class RedisCache:
    def __init__(self, url: str, prefix: str = "cal:", enabled: bool = True):
        self._client = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = prefix
        self._enabled = enabled

    def _key(self, key: LookupKey) -> str:
        return f"{self._prefix}{key.as_str()}"

    async def get_json(self, key: LookupKey) -> Optional[Any]:
        if not self._enabled:
            return None
        try:
            raw = await self._client.get(self._key(key))
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as exc:
            logger.debug("Redis get_json failed: %s", exc)
            return None

    async def set_json(self, key: LookupKey, value: Any, ttl_seconds: int) -> None:
        if not self._enabled:
            return
        try:
            await self._client.set(self._key(key), json.dumps(value), ex=ttl_seconds)
        except Exception as exc:
            logger.debug("Redis set_json failed: %s", exc)

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except Exception as exc:
            logger.debug("Redis close failed: %s", exc)
