"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Transport-level request/response types shared by every component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

HTTPMethod: TypeAlias = str


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    """One outbound request as handed to the transport."""

    method: HTTPMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json: JSONValue = None

    def with_header(self, name: str, value: str) -> "HTTPRequest":
        """Return a copy with one header set (or replaced)."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return HTTPRequest(
            method=self.method,
            url=self.url,
            headers=headers,
            json=self.json,
        )


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    """Status, lower-cased headers and parsed JSON body of one exchange."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: JSONValue = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())


@dataclass(frozen=True, slots=True)
class TokenPair:
    """Access/refresh credential pair issued by the backend."""

    access_token: str
    refresh_token: str
