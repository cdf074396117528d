from __future__ import annotations

import asyncio
from email.utils import formatdate

import pytest

from dojo_client import CooldownPolicy, CooldownStore, InMemoryKeyValueStore
from dojo_client.runtime import parse_retry_after


def run_async(coro):
    return asyncio.run(coro)


class _Clock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


ENDPOINT = "http://api/api/courses"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("5", 5.0),
        (" 2.5 ", 2.5),
        (None, None),
        ("", None),
        ("0", None),
        ("-3", None),
        ("soon", None),
        ("nan", None),
        ("inf", None),
    ],
)
def test_parse_retry_after_delta_seconds(raw, expected):
    assert parse_retry_after(raw, now_s=0.0) == expected


def test_parse_retry_after_http_date():
    now = 1_700_000_000.0
    assert parse_retry_after(formatdate(now + 30, usegmt=True), now_s=now) == 30.0
    assert parse_retry_after(formatdate(now - 30, usegmt=True), now_s=now) is None


def test_blocked_until_cooldown_ends_then_record_is_deleted():
    async def scenario() -> None:
        clock = _Clock()
        storage = InMemoryKeyValueStore()
        store = CooldownStore(storage, clock=clock)

        assert (await store.is_blocked(ENDPOINT)).blocked is False
        record = await store.set_cooldown(ENDPOINT, 5)
        assert record.cooldown_end_s == clock.now + 5

        clock.advance(2)
        status = await store.is_blocked(ENDPOINT)
        assert status.blocked is True
        assert status.remaining_s == pytest.approx(3.0)

        clock.advance(3)
        assert (await store.is_blocked(ENDPOINT)).blocked is False
        assert storage.keys() == []

    run_async(scenario())


def test_set_cooldown_never_shortens_existing_record():
    async def scenario() -> None:
        clock = _Clock()
        store = CooldownStore(InMemoryKeyValueStore(), clock=clock)

        await store.set_cooldown(ENDPOINT, 30)
        shorter = await store.set_cooldown(ENDPOINT, 2)
        assert shorter.cooldown_end_s == clock.now + 30

        clock.advance(10)
        longer = await store.set_cooldown(ENDPOINT, 50)
        assert longer.cooldown_end_s == clock.now + 50

    run_async(scenario())


def test_cooldown_from_retry_after_clamps_and_defaults():
    clock = _Clock()
    store = CooldownStore(
        InMemoryKeyValueStore(),
        policy=CooldownPolicy(default_s=1.0, max_s=60.0),
        clock=clock,
    )
    assert store.cooldown_from_retry_after("5") == 5.0
    assert store.cooldown_from_retry_after("86400") == 60.0
    assert store.cooldown_from_retry_after(None) == 1.0
    assert store.cooldown_from_retry_after("garbage") == 1.0

    async def scenario() -> None:
        record = await store.set_cooldown(ENDPOINT, 10_000)
        assert record.cooldown_end_s == clock.now + 60

    run_async(scenario())


def test_cooldown_survives_a_new_store_over_same_storage():
    async def scenario() -> None:
        clock = _Clock()
        storage = InMemoryKeyValueStore()
        await CooldownStore(storage, clock=clock).set_cooldown(ENDPOINT, 5)

        reloaded = CooldownStore(storage, clock=clock)
        status = await reloaded.is_blocked(ENDPOINT)
        assert status.blocked is True
        assert status.remaining_s == pytest.approx(5.0)

    run_async(scenario())


def test_clear_and_unparsable_records():
    async def scenario() -> None:
        clock = _Clock()
        storage = InMemoryKeyValueStore()
        store = CooldownStore(storage, prefix="p:", clock=clock)

        await store.set_cooldown(ENDPOINT, 5)
        assert storage.keys() == [f"p:{ENDPOINT}"]
        await store.clear(ENDPOINT)
        assert (await store.is_blocked(ENDPOINT)).blocked is False
        await store.clear(ENDPOINT)

        await storage.write(f"p:{ENDPOINT}", "not-a-number")
        assert await store.get(ENDPOINT) is None
        assert storage.keys() == []

    run_async(scenario())
