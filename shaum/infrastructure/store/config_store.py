"""
Key-value stores for user fasting configuration.

The engine only needs get/set/delete by key; the medium is pluggable.
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import redis.asyncio as redis
import yaml

logger = logging.getLogger(__name__)


class ConfigStore(Protocol):
    async def get_json(self, key: str) -> Optional[Any]:
        ...

    async def set_json(self, key: str, value: Any) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class InMemoryConfigStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get_json(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set_json(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisConfigStore:
    def __init__(self, url: str, prefix: str = "fasting:"):
        self._client = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get_json(self, key: str) -> Optional[Any]:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def set_json(self, key: str, value: Any) -> None:
        await self._client.set(self._key(key), json.dumps(value))

    async def delete(self, key: str) -> None:
        await self._client.delete(self._key(key))

    async def close(self) -> None:
        await self._client.aclose()


class YamlConfigStore:
    """Single YAML document on disk, one top-level entry per key"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=True, allow_unicode=True)

    async def get_json(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    async def set_json(self, key: str, value: Any) -> None:
        async with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    async def delete(self, key: str) -> None:
        async with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


def build_config_store(backend: str, *, redis_url: str, path: str) -> ConfigStore:
    """Pick the store implementation named in settings"""
    if backend == "redis":
        return RedisConfigStore(redis_url)
    if backend == "yaml":
        return YamlConfigStore(Path(path))
    if backend != "memory":
        logger.warning("Unknown CONFIG_STORE_BACKEND %r, using in-memory store", backend)
    return InMemoryConfigStore()
