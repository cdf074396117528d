from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from dojo_client import HTTPRequest, HttpxTransport, TransportError
from dojo_client.transport import build_async_client


def run_async(coro):
    return asyncio.run(coro)


def test_send_maps_request_and_response():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            201,
            headers={"Retry-After": "3", "X-Request-Id": "abc"},
            json={"id": 9},
        )

    async def scenario() -> None:
        client = build_async_client(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client)
        response = await transport.send(
            HTTPRequest(
                method="POST",
                url="http://api.test/api/courses",
                headers={"Content-Type": "application/json", "Authorization": "Bearer t"},
                json={"title": "Intro"},
            )
        )
        assert response.status_code == 201
        assert response.ok
        assert response.body == {"id": 9}
        assert response.header("Retry-After") == "3"
        assert response.headers["x-request-id"] == "abc"

        await transport.aclose()
        assert not client.is_closed
        await client.aclose()

    run_async(scenario())
    request = seen[0]
    assert request.method == "POST"
    assert request.headers["authorization"] == "Bearer t"
    assert json.loads(request.content) == {"title": "Intro"}


def test_non_json_body_becomes_empty_object():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    async def scenario() -> None:
        transport = HttpxTransport(build_async_client(transport=httpx.MockTransport(handler)))
        response = await transport.send(HTTPRequest(method="GET", url="http://api.test/x"))
        assert response.status_code == 502
        assert not response.ok
        assert response.body == {}

    run_async(scenario())


def test_network_failure_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario() -> None:
        transport = HttpxTransport(build_async_client(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError) as exc:
            await transport.send(HTTPRequest(method="GET", url="http://api.test/x"))
        assert isinstance(exc.value.__cause__, httpx.ConnectError)

    run_async(scenario())


def test_owned_client_is_closed():
    async def scenario() -> None:
        transport = HttpxTransport(timeout_s=5)
        await transport.aclose()
        assert transport._client.is_closed

    run_async(scenario())
