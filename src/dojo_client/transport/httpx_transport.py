"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

httpx-backed transport adapter.
"""

from __future__ import annotations

import json

import httpx

from ..errors import TransportError
from ..types import HTTPRequest, HTTPResponse, JSONValue
from .base import HTTPTransport


def build_async_client(
    *,
    timeout_s: float | None = 30.0,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with JSON defaults."""
    headers = {"Accept": "application/json"}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_s),
        headers=headers,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> JSONValue:
    """Parse a JSON body, falling back to an empty object."""
    if not response.content:
        return {}
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


class HttpxTransport(HTTPTransport):
    """
    Perform exchanges through one shared ``httpx.AsyncClient``.

    Args:
        client: Client to reuse. Built from ``timeout_s`` when omitted; the
            transport then owns it and closes it in ``aclose``.
        timeout_s: Per-request timeout for an owned client.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_s: float | None = 30.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or build_async_client(timeout_s=timeout_s)

    async def send(self, request: HTTPRequest) -> HTTPResponse:
        kwargs = {}
        if request.json is not None:
            kwargs["content"] = json.dumps(request.json).encode("utf-8")
        try:
            response = await self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                **kwargs,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

        return HTTPResponse(
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=_decode_body(response),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
