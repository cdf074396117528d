"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: transport/base.py.
"""

from __future__ import annotations

from typing import Protocol

from ..types import HTTPRequest, HTTPResponse


class HTTPTransport(Protocol):
    """
    Single request/response exchange primitive.

    Implementations raise ``TransportError`` when the exchange cannot
    complete and otherwise return the response whatever its status.
    """

    async def send(self, request: HTTPRequest) -> HTTPResponse: ...

    async def aclose(self) -> None: ...
