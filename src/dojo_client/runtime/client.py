"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/client.py.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from ..cache.base import ResponseCacheBackend
from ..cache.registry import create_response_cache
from ..errors import AuthorizationError, RateLimitedError, ResponseError
from ..metrics import NoOpRequestMetrics, RequestMetrics
from ..settings import ClientSettings
from ..storage.base import KeyValueStore
from ..storage.memory import InMemoryKeyValueStore
from ..transport.base import HTTPTransport
from ..types import HTTPRequest, HTTPResponse, JSONValue
from .auth import UNAUTHORIZED, AuthenticatedExecutor
from .coalescing import InFlightRegistry
from .contracts import CachePolicy, CooldownPolicy
from .cooldown import CooldownStore
from .credentials import CredentialStore
from .keys import RequestKey, build_request_key, endpoint_key, resolve_url

logger = logging.getLogger("dojo_client.runtime")

TOO_MANY_REQUESTS = 429


def error_from_response(response: HTTPResponse) -> Exception:
    """Build the typed failure for a non-2xx, non-429 response."""
    body = response.body
    message: str | None = None
    code: str | None = None
    if isinstance(body, dict):
        for field in ("error", "message"):
            value = body.get(field)
            if isinstance(value, str) and value:
                message = value
                break
        raw_code = body.get("code")
        if raw_code is not None:
            code = str(raw_code)

    message = message or f"Request failed with status {response.status_code}"
    if response.status_code == UNAUTHORIZED:
        return AuthorizationError(message)
    return ResponseError(response.status_code, message, code=code, body=body)


class DojoClient:
    """
    Single entry point for every outbound backend call.

    Per call: reuse a fresh cached GET, refuse an endpoint in cooldown,
    then run through the in-flight registry so identical concurrent calls
    share one dispatch. The shared execution attaches credentials (when
    requested), records cooldowns on 429, clears them on success, and fills
    the cache for GETs.

    All mutable state lives on the instance; two clients never share cache,
    registry, cooldowns or credentials unless handed the same storage.
    """

    def __init__(
        self,
        *,
        settings: ClientSettings | None = None,
        transport: HTTPTransport | None = None,
        storage: KeyValueStore | None = None,
        cache_backend: str | ResponseCacheBackend | None = None,
        metrics: RequestMetrics | None = None,
        cache_policy: CachePolicy | None = None,
        cooldown_policy: CooldownPolicy | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or ClientSettings()
        if transport is None:
            from ..transport.httpx_transport import HttpxTransport

            transport = HttpxTransport(timeout_s=self.settings.timeout_s)
        self._transport = transport
        self._storage = storage if storage is not None else InMemoryKeyValueStore()
        self._metrics = metrics or NoOpRequestMetrics()
        self._clock = clock

        prefix = self.settings.key_prefix
        self._cache_policy = cache_policy or CachePolicy(ttl_s=self.settings.cache_ttl_s)
        self._cache = create_response_cache(
            cache_backend, prefix=f"{prefix}:cache:", clock=clock
        )
        self._cooldowns = CooldownStore(
            self._storage,
            policy=cooldown_policy
            or CooldownPolicy(
                default_s=self.settings.default_cooldown_s,
                max_s=self.settings.max_cooldown_s,
            ),
            prefix=f"{prefix}:cooldown:",
            clock=clock,
        )
        self._credentials = CredentialStore(self._storage, key=f"{prefix}:auth:tokens")
        self._inflight: InFlightRegistry[JSONValue] = InFlightRegistry()
        self._auth = AuthenticatedExecutor(
            self._transport,
            self._credentials,
            refresh_url=self.resolve_url(self.settings.refresh_path),
            metrics=self._metrics,
        )

    @property
    def cache(self) -> ResponseCacheBackend:
        return self._cache

    @property
    def cooldowns(self) -> CooldownStore:
        return self._cooldowns

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def inflight(self) -> InFlightRegistry[JSONValue]:
        return self._inflight

    def resolve_url(self, path: str) -> str:
        return resolve_url(self.settings.base_url, path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: JSONValue = None,
        headers: Mapping[str, str] | None = None,
        auth: bool = True,
        ttl_s: float | None = None,
        use_cache: bool = True,
    ) -> JSONValue:
        """
        Execute one call and return its parsed JSON body.

        Args:
            method: HTTP method.
            path: Path relative to ``settings.base_url``, or an absolute URL.
            json: Request body for non-GET calls.
            headers: Extra request headers.
            auth: Attach the bearer token and refresh once on 401.
            ttl_s: Cache lifetime for this GET; the policy default when None.
            use_cache: Read and populate the response cache (GET only).

        Raises:
            RateLimitedError: Endpoint is cooling down, or just answered 429.
            AuthorizationError: Credentials missing or refresh exhausted.
            ResponseError: Any other non-2xx response.
            TransportError: The exchange could not complete.
        """
        url = self.resolve_url(path)
        key = build_request_key(method, url, json)
        cacheable = key.method == "GET" and use_cache and self._cache_policy.enabled

        if cacheable:
            entry = await self._cache.get(key.cache_key)
            if entry is not None:
                self._metrics.incr("cache_hits")
                logger.debug("Cache hit for %s", key.cache_key)
                return entry.data

        endpoint = endpoint_key(url)
        status = await self._cooldowns.is_blocked(endpoint)
        if status.blocked:
            self._metrics.incr("cooldown_rejections")
            raise RateLimitedError(endpoint, status.remaining_s)

        if self._inflight.in_flight(key.value):
            self._metrics.incr("coalesced_waits")

        outbound = HTTPRequest(
            method=key.method,
            url=url,
            headers={"Content-Type": "application/json", **dict(headers or {})},
            json=json,
        )
        cache_ttl_s = self._cache_policy.ttl_s if ttl_s is None else ttl_s
        return await self._inflight.get_or_start(
            key.value,
            lambda: self._execute(
                outbound,
                key,
                endpoint,
                auth=auth,
                cache_ttl_s=cache_ttl_s if cacheable else None,
            ),
        )

    async def _execute(
        self,
        request: HTTPRequest,
        key: RequestKey,
        endpoint: str,
        *,
        auth: bool,
        cache_ttl_s: float | None,
    ) -> JSONValue:
        self._metrics.incr("dispatches")
        if auth:
            response = await self._auth.execute(request)
        else:
            response = await self._transport.send(request)

        if response.status_code == TOO_MANY_REQUESTS:
            self._metrics.incr("rate_limited")
            duration_s = self._cooldowns.cooldown_from_retry_after(
                response.header("retry-after")
            )
            record = await self._cooldowns.set_cooldown(endpoint, duration_s)
            raise RateLimitedError(endpoint, record.cooldown_end_s - self._clock())

        if not response.ok:
            raise error_from_response(response)

        await self._cooldowns.clear(endpoint)
        if cache_ttl_s is not None and cache_ttl_s > 0:
            await self._cache.put(key.cache_key, response.body, ttl_s=cache_ttl_s)
        return response.body

    async def get(self, path: str, **kwargs: Any) -> JSONValue:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: JSONValue = None, **kwargs: Any) -> JSONValue:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: JSONValue = None, **kwargs: Any) -> JSONValue:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: JSONValue = None, **kwargs: Any) -> JSONValue:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> JSONValue:
        return await self.request("DELETE", path, **kwargs)

    async def invalidate(self, path: str) -> None:
        """Drop the cached GET for `path`."""
        await self._cache.invalidate(build_request_key("GET", self.resolve_url(path)).cache_key)

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> "DojoClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
