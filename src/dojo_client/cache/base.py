"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/base.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..types import JSONValue


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One cached GET payload with its expiry timestamp."""

    data: JSONValue
    expires_at_s: float

    def is_fresh(self, now_s: float) -> bool:
        return now_s < self.expires_at_s


class ResponseCacheBackend(Protocol):
    """Protocol implemented by cache backends used by the request facade."""

    backend_id: str

    async def get(self, key: str) -> CacheEntry | None: ...

    async def put(self, key: str, data: JSONValue, *, ttl_s: float) -> None: ...

    async def invalidate(self, key: str) -> None: ...

    async def clear(self) -> None: ...
