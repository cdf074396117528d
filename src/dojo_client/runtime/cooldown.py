"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Persisted per-endpoint embargo recorded after rate-limit responses.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from email.utils import parsedate_to_datetime

from ..storage.base import KeyValueStore
from .contracts import CooldownPolicy

logger = logging.getLogger("dojo_client.cooldown")


@dataclass(frozen=True, slots=True)
class CooldownRecord:
    """Do-not-call-before timestamp for one endpoint."""

    endpoint_key: str
    cooldown_end_s: float


@dataclass(frozen=True, slots=True)
class CooldownStatus:
    """Admission check result."""

    blocked: bool
    remaining_s: float = 0.0


def parse_retry_after(value: str | None, *, now_s: float) -> float | None:
    """
    Parse a ``Retry-After`` header into seconds.

    Accepts delta-seconds or an HTTP-date. Returns None when the header is
    absent, unparsable, non-finite or not positive.
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None

    try:
        seconds = float(raw)
    except ValueError:
        try:
            when = parsedate_to_datetime(raw)
        except (TypeError, ValueError, IndexError):
            return None
        if when.tzinfo is None:
            return None
        seconds = when.timestamp() - now_s

    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return seconds


class CooldownStore:
    """
    Record, check and clear per-endpoint cooldowns on a durable medium.

    Values are wall-clock end timestamps so a record written by one process
    is honoured by the next one reading the same storage. A record is only
    ever extended by ``set_cooldown``; ``clear`` removes it outright.

    Args:
        storage: Durable key/value backend.
        policy: Default and maximum embargo durations.
        prefix: Key prefix for namespacing.
        clock: Wall-clock source, seconds since the epoch.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        policy: CooldownPolicy | None = None,
        prefix: str = "dojo:cooldown:",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._policy = policy or CooldownPolicy()
        self._prefix = prefix
        self._clock = clock

    @property
    def policy(self) -> CooldownPolicy:
        return self._policy

    def _key(self, endpoint_key: str) -> str:
        return f"{self._prefix}{endpoint_key}"

    async def _read_end(self, endpoint_key: str) -> float | None:
        """Return the active end timestamp, deleting stale or corrupt rows."""
        key = self._key(endpoint_key)
        raw = await self._storage.read(key)
        if raw is None:
            return None
        try:
            end_s = float(raw)
        except ValueError:
            logger.warning("Dropping unparsable cooldown record for %s", endpoint_key)
            await self._storage.delete(key)
            return None
        if not math.isfinite(end_s) or end_s <= self._clock():
            await self._storage.delete(key)
            return None
        return end_s

    async def get(self, endpoint_key: str) -> CooldownRecord | None:
        end_s = await self._read_end(endpoint_key)
        if end_s is None:
            return None
        return CooldownRecord(endpoint_key=endpoint_key, cooldown_end_s=end_s)

    async def is_blocked(self, endpoint_key: str) -> CooldownStatus:
        end_s = await self._read_end(endpoint_key)
        if end_s is None:
            return CooldownStatus(blocked=False)
        return CooldownStatus(blocked=True, remaining_s=max(0.0, end_s - self._clock()))

    async def set_cooldown(self, endpoint_key: str, duration_s: float) -> CooldownRecord:
        end_s = self._clock() + self._policy.clamp(duration_s)
        existing = await self._read_end(endpoint_key)
        if existing is not None and existing > end_s:
            end_s = existing
        await self._storage.write(self._key(endpoint_key), repr(end_s))
        logger.info(
            "Cooling down %s for %.1fs", endpoint_key, max(0.0, end_s - self._clock())
        )
        return CooldownRecord(endpoint_key=endpoint_key, cooldown_end_s=end_s)

    async def clear(self, endpoint_key: str) -> None:
        key = self._key(endpoint_key)
        if await self._storage.read(key) is None:
            return
        await self._storage.delete(key)
        logger.info("Cleared cooldown for %s", endpoint_key)

    def cooldown_from_retry_after(self, value: str | None) -> float:
        """Embargo length for a 429 carrying this ``Retry-After`` value."""
        seconds = parse_retry_after(value, now_s=self._clock())
        if seconds is None:
            seconds = self._policy.default_s
        return self._policy.clamp(seconds)
