"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/redis.py.
"""

from __future__ import annotations

from typing import Any

from .base import KeyValueStore


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed store shared by every process using the same server.

    Requires ``redis.asyncio`` (``pip install redis``).

    Args:
        redis: An ``redis.asyncio.Redis`` client instance.
    """

    backend_id = "redis"

    def __init__(self, redis: Any) -> None:
        self._redis = redis

    async def read(self, key: str) -> str | None:
        blob = await self._redis.get(key)
        if blob is None:
            return None
        if isinstance(blob, bytes):
            return blob.decode("utf-8")
        return str(blob)

    async def write(self, key: str, value: str) -> None:
        await self._redis.set(key, value)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)
