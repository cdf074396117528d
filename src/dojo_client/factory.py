"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for assembling a client from environment variables.
"""

from __future__ import annotations

import os
from typing import Any

from .errors import ClientConfigurationError
from .metrics import RequestMetrics
from .runtime.client import DojoClient
from .settings import ClientSettings
from .storage.base import KeyValueStore
from .storage.file import JsonFileKeyValueStore
from .storage.memory import InMemoryKeyValueStore
from .transport.base import HTTPTransport


def _env(*names: str) -> str | None:
    """Value of the first set, non-blank variable among `names`."""
    values = (os.environ.get(name, "").strip() for name in names)
    return next((value for value in values if value), None)


def _default_state_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".dojo-client", "state.json")


def _storage_backend() -> str:
    return (_env("DOJO_STORAGE_BACKEND") or "file").lower()


def _redis_from_env() -> Any:
    try:
        import redis.asyncio as redis
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise ClientConfigurationError(
            "Redis backends require `redis` to be installed."
        ) from exc

    url = _env("DOJO_REDIS_URL", "REDIS_URL")
    if not url:
        host = _env("DOJO_REDIS_HOST") or "localhost"
        port = _env("DOJO_REDIS_PORT") or "6379"
        db = _env("DOJO_REDIS_DB") or "0"
        password = _env("DOJO_REDIS_PASSWORD")
        auth = f":{password}@" if password else ""
        url = f"redis://{auth}{host}:{port}/{db}"
    return redis.Redis.from_url(url)


def create_storage_from_env(*, redis_client: Any | None = None) -> KeyValueStore:
    """
    Create the durable key/value backend from `DOJO_STORAGE_*` variables.

    Backends:
    - `file` (default) at `DOJO_STORAGE_PATH`, else `~/.dojo-client/state.json`
    - `memory`, for tests and throwaway sessions; nothing survives a restart
    - `redis`, using `redis_client` or `DOJO_REDIS_*` variables
    """
    backend = _storage_backend()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryKeyValueStore()

    if backend == "file":
        path = _env("DOJO_STORAGE_PATH") or _default_state_path()
        return JsonFileKeyValueStore(path)

    if backend == "redis":
        from .storage.redis import RedisKeyValueStore

        return RedisKeyValueStore(redis_client or _redis_from_env())

    raise ClientConfigurationError(f"Unknown DOJO_STORAGE_BACKEND: {backend}")


def create_client_from_env(
    *,
    redis_client: Any | None = None,
    transport: HTTPTransport | None = None,
    metrics: RequestMetrics | None = None,
) -> DojoClient:
    """
    Create a `DojoClient` from `DOJO_*` environment variables.

    Credentials and cooldowns persist to the JSON file store unless
    `DOJO_STORAGE_BACKEND` says otherwise. `DOJO_CACHE_BACKEND` selects
    `inmemory` (default) or `redis`; a Redis client is built once and shared with Redis storage when both need it.
    """
    settings = ClientSettings.from_env()
    cache_backend = (_env("DOJO_CACHE_BACKEND") or "inmemory").lower()
    storage_backend = _storage_backend()

    if redis_client is None and "redis" in (cache_backend, storage_backend):
        redis_client = _redis_from_env()

    cache: Any = cache_backend
    if cache_backend == "redis":
        from .cache.redis import RedisResponseCache

        cache = RedisResponseCache(redis_client, prefix=f"{settings.key_prefix}:cache:")

    return DojoClient(
        settings=settings,
        transport=transport,
        storage=create_storage_from_env(redis_client=redis_client),
        cache_backend=cache,
        metrics=metrics,
    )
