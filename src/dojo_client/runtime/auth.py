"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bearer-credential executor with a single shared refresh-and-retry.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..errors import AuthorizationError, ResponseError
from ..metrics import NoOpRequestMetrics, RequestMetrics
from ..models import AuthTokensResponse
from ..transport.base import HTTPTransport
from ..types import HTTPRequest, HTTPResponse, TokenPair
from .coalescing import InFlightRegistry
from .credentials import CredentialStore

logger = logging.getLogger("dojo_client.auth")

UNAUTHORIZED = 401
TOO_MANY_REQUESTS = 429


class AuthState(str, Enum):
    """Per-call progress through the refresh-and-retry flow."""

    IDLE = "idle"
    REFRESHING = "refreshing"
    RETRIED = "retried"


class AuthenticatedExecutor:
    """
    Dispatch requests with the stored bearer token.

    A 401 moves the call from ``IDLE`` to ``REFRESHING``: the refresh token is
    exchanged for a new pair (shared by every call that hit 401 with the
    same refresh token), then the call is dispatched once more in state
    ``RETRIED``. Whatever that second attempt returns is final; a second 401
    never triggers another refresh.

    Args:
        transport: Exchange primitive.
        credentials: Token pair owner.
        refresh_url: Absolute URL of the refresh endpoint.
        metrics: Counter sink.
    """

    def __init__(
        self,
        transport: HTTPTransport,
        credentials: CredentialStore,
        *,
        refresh_url: str,
        metrics: RequestMetrics | None = None,
    ) -> None:
        self._transport = transport
        self._credentials = credentials
        self._refresh_url = refresh_url
        self._metrics = metrics or NoOpRequestMetrics()
        self._refreshes: InFlightRegistry[TokenPair] = InFlightRegistry()

    @property
    def refresh_in_flight(self) -> bool:
        return len(self._refreshes) > 0

    async def execute(self, request: HTTPRequest) -> HTTPResponse:
        pair = await self._credentials.get()
        token = pair.access_token if pair is not None else None
        state = AuthState.IDLE

        while True:
            response = await self._dispatch(request, token)
            if response.status_code != UNAUTHORIZED:
                return response

            if state is AuthState.RETRIED:
                logger.warning("Refreshed credentials rejected for %s", request.url)
                await self._credentials.clear()
                raise AuthorizationError("Authorization required")

            state = AuthState.REFRESHING
            logger.debug("%s %s -> 401, state=%s", request.method, request.url, state.value)
            token = (await self._refreshed_pair(token)).access_token
            state = AuthState.RETRIED

    async def _dispatch(self, request: HTTPRequest, token: str | None) -> HTTPResponse:
        if token:
            request = request.with_header("Authorization", f"Bearer {token}")
        return await self._transport.send(request)

    async def _refreshed_pair(self, rejected_token: str | None) -> TokenPair:
        """Return a pair newer than `rejected_token`, refreshing at most once."""
        pair = await self._credentials.get()
        if pair is None or not pair.refresh_token:
            await self._credentials.clear()
            raise AuthorizationError("Authorization required")

        if pair.access_token != rejected_token:
            # Another call already refreshed while this one was in flight.
            return pair

        refresh_token = pair.refresh_token
        return await self._refreshes.get_or_start(
            refresh_token, lambda: self._refresh(refresh_token)
        )

    async def _refresh(self, refresh_token: str) -> TokenPair:
        self._metrics.incr("token_refreshes")
        response = await self._transport.send(
            HTTPRequest(
                method="POST",
                url=self._refresh_url,
                headers={"Content-Type": "application/json"},
                json={"refreshToken": refresh_token},
            )
        )
        result = AuthTokensResponse.parse_body(response.body)
        if response.status_code == TOO_MANY_REQUESTS or response.status_code >= 500:
            # Server-side failure: the refresh token was never judged.
            self._metrics.incr("token_refresh_failures")
            logger.warning(
                "Token refresh unavailable with status %s", response.status_code
            )
            raise ResponseError(
                response.status_code,
                result.error or f"Token refresh failed with status {response.status_code}",
                body=response.body,
            )

        pair = result.token_pair() if response.ok else None
        if pair is None:
            self._metrics.incr("token_refresh_failures")
            logger.warning(
                "Token refresh failed with status %s: %s",
                response.status_code,
                result.error or "no token pair returned",
            )
            await self._credentials.clear()
            raise AuthorizationError("Session expired, please sign in again")

        await self._credentials.set(pair)
        logger.info("Access token refreshed")
        return pair
