"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request identity used for caching, coalescing and cooldown lookups.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from ..types import JSONValue


@dataclass(frozen=True, slots=True)
class RequestKey:
    """Identity of one logical call: method, resolved url and body digest."""

    method: str
    url: str
    body_fingerprint: str = ""

    @property
    def value(self) -> str:
        """Key used by the in-flight registry."""
        return f"{self.method}:{self.url}:{self.body_fingerprint}"

    @property
    def cache_key(self) -> str:
        """Key used by the response cache."""
        return f"{self.method}:{self.url}"


def body_fingerprint(body: JSONValue) -> str:
    """Build deterministic digest of a JSON body (empty for no body)."""
    if body is None:
        return ""
    normalized = json.dumps(
        body,
        ensure_ascii=True,
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def build_request_key(method: str, url: str, body: JSONValue = None) -> RequestKey:
    method = method.strip().upper()
    if method == "GET":
        return RequestKey(method=method, url=url)
    return RequestKey(method=method, url=url, body_fingerprint=body_fingerprint(body))


def endpoint_key(url: str) -> str:
    """Strip query and fragment so every variant of an endpoint shares one key."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def resolve_url(base_url: str, path: str) -> str:
    """Join `path` onto `base_url` unless it is already absolute."""
    if path.startswith(("http://", "https://")):
        return path
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
