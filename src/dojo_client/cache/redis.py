"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/redis.py.
"""

from __future__ import annotations

import json
import math
import time
from collections.abc import Callable
from typing import Any

from ..types import JSONValue
from .base import CacheEntry, ResponseCacheBackend


class RedisResponseCache(ResponseCacheBackend):
    """
    Redis-backed cache backend for multi-process deployments.

    Redis expiry works in whole seconds, so each row also carries its exact
    ``expires_at_s`` and is re-checked on read.
    """

    backend_id = "redis"

    def __init__(
        self,
        redis_client: Any,
        *,
        prefix: str = "dojo:cache:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._redis = redis_client
        self._prefix = prefix
        self._clock = clock
        self._keys: set[str] = set()

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> CacheEntry | None:
        blob = await self._redis.get(self._key(key))
        if blob is None:
            return None
        try:
            row = json.loads(blob)
            entry = CacheEntry(data=row["data"], expires_at_s=float(row["expires_at_s"]))
        except (ValueError, TypeError, KeyError):
            await self._redis.delete(self._key(key))
            return None

        if not entry.is_fresh(self._clock()):
            await self._redis.delete(self._key(key))
            return None
        return entry

    async def put(self, key: str, data: JSONValue, *, ttl_s: float) -> None:
        payload = {"data": data, "expires_at_s": self._clock() + ttl_s}
        await self._redis.setex(
            self._key(key),
            max(1, math.ceil(ttl_s)),
            json.dumps(payload, ensure_ascii=True),
        )
        self._keys.add(key)

    async def invalidate(self, key: str) -> None:
        await self._redis.delete(self._key(key))
        self._keys.discard(key)

    async def clear(self) -> None:
        """Drop every row this instance has written."""
        for key in list(self._keys):
            await self._redis.delete(self._key(key))
        self._keys.clear()
