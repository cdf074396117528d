"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed failures surfaced by the request-coordination layer.
"""

from __future__ import annotations

from .types import JSONValue


class DojoClientError(Exception):
    """Base class for all client errors."""


class ClientConfigurationError(DojoClientError):
    """Raised when settings or backend selection are invalid."""


class TransportError(DojoClientError):
    """Raised when the network exchange itself could not complete."""


class RateLimitedError(DojoClientError):
    """Raised when an endpoint is cooling down after a 429 response."""

    def __init__(self, endpoint_key: str, remaining_s: float) -> None:
        self.endpoint_key = endpoint_key
        self.remaining_s = max(0.0, remaining_s)
        super().__init__(
            f"Rate limited on '{endpoint_key}', retry in {self.remaining_s:.1f}s"
        )


class AuthorizationError(DojoClientError):
    """Raised when credentials are missing or could not be refreshed."""


class ResponseError(DojoClientError):
    """Raised for any other non-2xx response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        code: str | None = None,
        body: JSONValue = None,
    ) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        self.body = body
        super().__init__(message)
