"""
In-process cache with per-entry expiry.
"""

from __future__ import annotations

import copy
import time
from typing import Any, Callable, Dict, Optional, Tuple

from shaum.infrastructure.calendar.types import LookupKey


class InMemoryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[LookupKey, Tuple[float, Any]] = {}
        self._clock = clock

    async def get_json(self, key: LookupKey) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return copy.deepcopy(value)

    async def set_json(self, key: LookupKey, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, copy.deepcopy(value))
