"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: transport/__init__.py.
"""

from .base import HTTPTransport
from .httpx_transport import HttpxTransport, build_async_client

__all__ = ["HTTPTransport", "HttpxTransport", "build_async_client"]
