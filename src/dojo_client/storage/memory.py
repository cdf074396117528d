"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/memory.py.
"""

from __future__ import annotations

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """
    Process-local store suitable for tests.

    Two cooldown stores sharing one instance behave like two page loads
    sharing the same browser storage.
    """

    backend_id = "memory"

    def __init__(self) -> None:
        self._rows: dict[str, str] = {}

    async def read(self, key: str) -> str | None:
        return self._rows.get(key)

    async def write(self, key: str, value: str) -> None:
        self._rows[key] = value

    async def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._rows.keys())
