"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/registry.py.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from ..errors import ClientConfigurationError
from .base import ResponseCacheBackend
from .inmemory import InMemoryResponseCache
from .redis import RedisResponseCache


def create_response_cache(
    backend: str | ResponseCacheBackend | None = None,
    *,
    redis_client: Any | None = None,
    prefix: str = "dojo:cache:",
    clock: Callable[[], float] = time.time,
) -> ResponseCacheBackend:
    """
    Resolve a cache backend from id/instance/default.

    Every id-based call builds a fresh backend so independent clients never
    share cached rows.
    """
    if backend is not None and not isinstance(backend, str):
        return backend

    key = (backend or "inmemory").strip().lower()
    if key in ("inmemory", "memory", "in_memory"):
        return InMemoryResponseCache(clock=clock)
    if key == "redis":
        if redis_client is None:
            raise ClientConfigurationError("Redis cache backend requires a redis client")
        return RedisResponseCache(redis_client, prefix=prefix, clock=clock)
    raise ClientConfigurationError(f"Unknown response cache backend '{backend}'")
