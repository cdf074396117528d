"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client-side request coordination for the course platform backend.

Caches short-lived GET results, coalesces identical concurrent calls,
enforces per-endpoint cooldowns after rate limiting, and refreshes expired
access tokens once before retrying.

Quick start::

    from dojo_client import AccountsAPI, ClientSettings, DojoClient

    async with DojoClient(settings=ClientSettings(base_url="https://api.example")) as client:
        await AccountsAPI(client).login("me@example.com", "secret")
        courses = await client.get("/api/courses")
"""

from .accounts import AccountsAPI
from .cache import (
    CacheEntry,
    InMemoryResponseCache,
    RedisResponseCache,
    ResponseCacheBackend,
    create_response_cache,
)
from .errors import (
    AuthorizationError,
    ClientConfigurationError,
    DojoClientError,
    RateLimitedError,
    ResponseError,
    TransportError,
)
from .factory import create_client_from_env, create_storage_from_env
from .metrics import NoOpRequestMetrics, PrometheusRequestMetrics, RequestMetrics
from .models import AuthTokensResponse
from .runtime import (
    AuthenticatedExecutor,
    AuthState,
    CachePolicy,
    CooldownPolicy,
    CooldownRecord,
    CooldownStatus,
    CooldownStore,
    CredentialStore,
    DojoClient,
    InFlightRegistry,
    RequestKey,
    build_request_key,
    endpoint_key,
)
from .settings import ClientSettings
from .storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
)
from .transport import HTTPTransport, HttpxTransport
from .types import HTTPRequest, HTTPResponse, JSONValue, TokenPair

__all__ = [
    "DojoClient",
    "AccountsAPI",
    "ClientSettings",
    "create_client_from_env",
    "create_storage_from_env",
    "DojoClientError",
    "ClientConfigurationError",
    "TransportError",
    "RateLimitedError",
    "AuthorizationError",
    "ResponseError",
    "CacheEntry",
    "ResponseCacheBackend",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "create_response_cache",
    "InFlightRegistry",
    "CooldownStore",
    "CooldownRecord",
    "CooldownStatus",
    "CooldownPolicy",
    "CachePolicy",
    "CredentialStore",
    "AuthenticatedExecutor",
    "AuthState",
    "RequestKey",
    "build_request_key",
    "endpoint_key",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RedisKeyValueStore",
    "HTTPTransport",
    "HttpxTransport",
    "RequestMetrics",
    "NoOpRequestMetrics",
    "PrometheusRequestMetrics",
    "AuthTokensResponse",
    "HTTPRequest",
    "HTTPResponse",
    "JSONValue",
    "TokenPair",
]
