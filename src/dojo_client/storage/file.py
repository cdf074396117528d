"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

JSON-document store persisted on local disk.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from .base import KeyValueStore

logger = logging.getLogger("dojo_client.storage")


class JsonFileKeyValueStore(KeyValueStore):
    """
    Keep every key in one JSON object on disk.

    Disk I/O runs in a worker thread via ``asyncio.to_thread``; writes and
    deletes are serialised by a lock so concurrent read-modify-write cycles
    never lose an update. Writes go through a temporary file and
    ``os.replace`` so a crash never leaves a half-written document behind.
    A corrupt document is treated as empty and overwritten on the next write.

    Args:
        path: Location of the JSON document. Parent directories are created.
    """

    backend_id = "file"

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt key/value document at %s", self._path)
            return {}
        if not isinstance(rows, dict):
            return {}
        return {str(k): str(v) for k, v in rows.items()}

    def _dump(self, rows: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".dojo-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(rows, handle, ensure_ascii=True, sort_keys=True)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def read(self, key: str) -> str | None:
        rows = await asyncio.to_thread(self._load)
        return rows.get(key)

    async def write(self, key: str, value: str) -> None:
        async with self._lock:
            rows = await asyncio.to_thread(self._load)
            rows[key] = value
            await asyncio.to_thread(self._dump, rows)

    async def delete(self, key: str) -> None:
        async with self._lock:
            rows = await asyncio.to_thread(self._load)
            if rows.pop(key, None) is not None:
                await asyncio.to_thread(self._dump, rows)
