"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/credentials.py.
"""

from __future__ import annotations

import json
import logging

from ..storage.base import KeyValueStore
from ..storage.memory import InMemoryKeyValueStore
from ..types import TokenPair

logger = logging.getLogger("dojo_client.auth")


class CredentialStore:
    """
    Hold the current token pair, mirrored to durable storage.

    The in-memory copy is updated before the storage write so readers in
    the same continuation see the new pair immediately.
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        *,
        key: str = "dojo:auth:tokens",
    ) -> None:
        self._storage = storage if storage is not None else InMemoryKeyValueStore()
        self._key = key
        self._pair: TokenPair | None = None
        self._loaded = False

    async def get(self) -> TokenPair | None:
        if not self._loaded:
            self._pair = await self._load()
            self._loaded = True
        return self._pair

    async def set(self, pair: TokenPair) -> None:
        self._pair = pair
        self._loaded = True
        await self._storage.write(
            self._key,
            json.dumps(
                {"accessToken": pair.access_token, "refreshToken": pair.refresh_token}
            ),
        )

    async def clear(self) -> None:
        self._pair = None
        self._loaded = True
        await self._storage.delete(self._key)

    async def _load(self) -> TokenPair | None:
        raw = await self._storage.read(self._key)
        if raw is None:
            return None
        try:
            row = json.loads(raw)
            access = row["accessToken"]
            refresh = row["refreshToken"]
        except (ValueError, TypeError, KeyError):
            logger.warning("Discarding unreadable stored credentials")
            await self._storage.delete(self._key)
            return None
        if not isinstance(access, str) or not isinstance(refresh, str):
            return None
        return TokenPair(access_token=access, refresh_token=refresh)
