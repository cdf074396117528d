"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: storage/base.py.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Durable string key/value medium used for cooldowns and credentials."""

    backend_id: str

    async def read(self, key: str) -> str | None: ...

    async def write(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...
