"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Sign-in helpers that own the credential lifecycle.
"""

from __future__ import annotations

import logging

from .errors import AuthorizationError, ResponseError
from .models import AuthTokensResponse
from .runtime.client import DojoClient
from .types import JSONValue

logger = logging.getLogger("dojo_client.auth")


class AccountsAPI:
    """
    Login, registration and logout on top of a `DojoClient`.

    Successful sign-in responses store the issued token pair on the client;
    logout erases it together with every cached response.
    """

    def __init__(
        self,
        client: DojoClient,
        *,
        login_path: str = "/api/auth/login",
        register_path: str = "/api/auth/register",
        google_path: str = "/api/user-auth/google",
        profile_path: str = "/api/auth/profile",
    ) -> None:
        self._client = client
        self._login_path = login_path
        self._register_path = register_path
        self._google_path = google_path
        self._profile_path = profile_path

    async def _sign_in(self, path: str, payload: dict[str, JSONValue]) -> AuthTokensResponse:
        try:
            body = await self._client.post(path, payload, auth=False)
        except AuthorizationError as exc:
            body = {"error": str(exc)}
        except ResponseError as exc:
            body = exc.body if isinstance(exc.body, dict) else {"error": exc.message}
        result = AuthTokensResponse.parse_body(body)
        if not result.success and result.error is None:
            result = result.model_copy(update={"error": "Sign-in failed"})
        pair = result.token_pair()
        if pair is not None:
            await self._client.credentials.set(pair)
            logger.info("Signed in via %s", path)
        return result

    async def login(self, email: str, password: str) -> AuthTokensResponse:
        return await self._sign_in(self._login_path, {"email": email, "password": password})

    async def register(
        self, email: str, password: str, name: str | None = None
    ) -> AuthTokensResponse:
        payload: dict[str, JSONValue] = {"email": email, "password": password}
        if name is not None:
            payload["name"] = name
        return await self._sign_in(self._register_path, payload)

    async def google_login(self, id_token: str) -> AuthTokensResponse:
        return await self._sign_in(self._google_path, {"idToken": id_token})

    async def profile(self) -> JSONValue:
        """Fetch the signed-in user's profile (never cached)."""
        return await self._client.get(self._profile_path, use_cache=False)

    async def logout(self) -> None:
        await self._client.credentials.clear()
        await self._client.cache.clear()
        logger.info("Signed out")
