from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from dojo_client import (
    ClientConfigurationError,
    ClientSettings,
    HTTPResponse,
    InMemoryKeyValueStore,
    InMemoryResponseCache,
    JsonFileKeyValueStore,
    RedisKeyValueStore,
    RedisResponseCache,
    TokenPair,
    create_client_from_env,
    create_storage_from_env,
)


class _Transport:
    def __init__(self) -> None:
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        return HTTPResponse(status_code=200, body={"ok": True})

    async def aclose(self) -> None:
        return None


class _FakeRedis:
    def __init__(self) -> None:
        self.rows: dict[str, bytes] = {}

    async def get(self, key):
        return self.rows.get(key)

    async def set(self, key, value):
        self.rows[key] = value.encode("utf-8")

    async def setex(self, key, ttl, value):
        self.rows[key] = value.encode("utf-8")

    async def delete(self, key):
        self.rows.pop(key, None)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DOJO_API_BASE_URL", "https://backend.example")
    monkeypatch.setenv("DOJO_CACHE_TTL_S", "15")
    monkeypatch.setenv("DOJO_COOLDOWN_DEFAULT_S", "2")
    monkeypatch.setenv("DOJO_COOLDOWN_MAX_S", "120")
    monkeypatch.setenv("DOJO_TIMEOUT_S", "none")

    settings = ClientSettings.from_env()
    assert settings.base_url == "https://backend.example"
    assert settings.cache_ttl_s == 15.0
    assert settings.default_cooldown_s == 2.0
    assert settings.max_cooldown_s == 120.0
    assert settings.timeout_s is None
    assert settings.refresh_path == "/api/auth/refresh"


def test_settings_reject_invalid_values(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DOJO_CACHE_TTL_S", "ten")
    with pytest.raises(ClientConfigurationError):
        ClientSettings.from_env()

    with pytest.raises(ClientConfigurationError):
        ClientSettings(default_cooldown_s=10, max_cooldown_s=5)
    with pytest.raises(ClientConfigurationError):
        ClientSettings(cache_ttl_s=-1)


def test_storage_backends_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("DOJO_STORAGE_BACKEND", raising=False)
    monkeypatch.delenv("DOJO_STORAGE_PATH", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    default = create_storage_from_env()
    assert isinstance(default, JsonFileKeyValueStore)
    assert default.path == tmp_path / ".dojo-client" / "state.json"

    monkeypatch.setenv("DOJO_STORAGE_BACKEND", "memory")
    assert isinstance(create_storage_from_env(), InMemoryKeyValueStore)

    monkeypatch.setenv("DOJO_STORAGE_BACKEND", "file")
    monkeypatch.setenv("DOJO_STORAGE_PATH", str(tmp_path / "state.json"))
    store = create_storage_from_env()
    assert isinstance(store, JsonFileKeyValueStore)
    assert store.path == tmp_path / "state.json"

    monkeypatch.setenv("DOJO_STORAGE_BACKEND", "redis")
    assert isinstance(create_storage_from_env(redis_client=_FakeRedis()), RedisKeyValueStore)

    monkeypatch.setenv("DOJO_STORAGE_BACKEND", "sqlite")
    with pytest.raises(ClientConfigurationError):
        create_storage_from_env()


def test_create_client_from_env_wires_backends(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DOJO_API_BASE_URL", "https://backend.example/")
    monkeypatch.setenv("DOJO_STORAGE_BACKEND", "redis")
    monkeypatch.setenv("DOJO_CACHE_BACKEND", "redis")
    redis = _FakeRedis()
    transport = _Transport()

    client = create_client_from_env(redis_client=redis, transport=transport)
    assert isinstance(client.cache, RedisResponseCache)

    async def scenario() -> None:
        assert await client.get("api/courses") == {"ok": True}
        assert await client.get("/api/courses") == {"ok": True}

    asyncio.run(scenario())
    assert [r.url for r in transport.requests] == ["https://backend.example/api/courses"]
    assert any(key.startswith("dojo:cache:") for key in redis.rows)


def test_create_client_from_env_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in (
        "DOJO_STORAGE_BACKEND",
        "DOJO_STORAGE_PATH",
        "DOJO_CACHE_BACKEND",
        "DOJO_API_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    client = create_client_from_env(transport=_Transport())
    assert isinstance(client.cache, InMemoryResponseCache)
    assert client.resolve_url("/api/x") == "http://localhost:3002/api/x"


def test_default_client_keeps_credentials_across_restarts(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
):
    for name in ("DOJO_STORAGE_BACKEND", "DOJO_STORAGE_PATH", "DOJO_CACHE_BACKEND"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    pair = TokenPair(access_token="a", refresh_token="r")

    async def scenario() -> None:
        first = create_client_from_env(transport=_Transport())
        await first.credentials.set(pair)
        await first.aclose()

        second = create_client_from_env(transport=_Transport())
        assert await second.credentials.get() == pair
        await second.aclose()

    asyncio.run(scenario())
    assert (tmp_path / ".dojo-client" / "state.json").is_file()
