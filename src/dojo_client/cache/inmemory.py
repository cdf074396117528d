"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/inmemory.py.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from ..types import JSONValue
from .base import CacheEntry, ResponseCacheBackend


class InMemoryResponseCache(ResponseCacheBackend):
    """Process-local cache backend. Expired rows are dropped lazily on read."""

    backend_id = "inmemory"

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._rows: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if not row.is_fresh(self._clock()):
            self._rows.pop(key, None)
            return None
        return row

    async def put(self, key: str, data: JSONValue, *, ttl_s: float) -> None:
        self._rows[key] = CacheEntry(data=data, expires_at_s=self._clock() + ttl_s)

    async def invalidate(self, key: str) -> None:
        self._rows.pop(key, None)

    async def clear(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)
