"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Durable key/value backends for cooldown and credential persistence.
"""

from .base import KeyValueStore
from .file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "RedisKeyValueStore",
]
