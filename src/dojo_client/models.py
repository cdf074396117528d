"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Response payloads issued by the auth endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .types import JSONValue, TokenPair


class AuthTokensResponse(BaseModel):
    """Body of login, register, google and refresh responses."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = False
    access_token: str | None = Field(default=None, alias="accessToken")
    refresh_token: str | None = Field(default=None, alias="refreshToken")
    user: dict[str, Any] | None = None
    error: str | None = None

    def token_pair(self) -> TokenPair | None:
        """Return the issued pair, or None unless both tokens are present."""
        if not self.success or not self.access_token or not self.refresh_token:
            return None
        return TokenPair(access_token=self.access_token, refresh_token=self.refresh_token)

    @classmethod
    def parse_body(cls, body: JSONValue) -> "AuthTokensResponse":
        """Validate a JSON body leniently; malformed bodies become failures."""
        if not isinstance(body, dict):
            return cls(success=False, error="Malformed auth response")
        try:
            return cls.model_validate(body)
        except ValidationError:
            return cls(success=False, error="Malformed auth response")
