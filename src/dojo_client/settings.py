"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Client settings and explicit environment loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ClientConfigurationError


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default).strip() or default
    try:
        return float(raw)
    except ValueError as exc:
        raise ClientConfigurationError(f"{name} must be a number, got '{raw}'") from exc


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Explicit settings used by the request facade and its collaborators."""

    base_url: str = "http://localhost:3002"
    refresh_path: str = "/api/auth/refresh"
    key_prefix: str = "dojo"

    cache_ttl_s: float = 10.0
    default_cooldown_s: float = 1.0
    max_cooldown_s: float = 60.0

    timeout_s: float | None = 30.0

    def __post_init__(self) -> None:
        if self.cache_ttl_s < 0:
            raise ClientConfigurationError("cache_ttl_s must be >= 0")
        if self.default_cooldown_s <= 0:
            raise ClientConfigurationError("default_cooldown_s must be > 0")
        if self.max_cooldown_s < self.default_cooldown_s:
            raise ClientConfigurationError("max_cooldown_s must be >= default_cooldown_s")

    @staticmethod
    def from_env() -> "ClientSettings":
        """Load settings from `DOJO_*` environment variables."""
        timeout = os.getenv("DOJO_TIMEOUT_S", "30").strip()
        return ClientSettings(
            base_url=os.getenv("DOJO_API_BASE_URL", "http://localhost:3002"),
            refresh_path=os.getenv("DOJO_REFRESH_PATH", "/api/auth/refresh"),
            key_prefix=os.getenv("DOJO_KEY_PREFIX", "dojo"),
            cache_ttl_s=_env_float("DOJO_CACHE_TTL_S", "10"),
            default_cooldown_s=_env_float("DOJO_COOLDOWN_DEFAULT_S", "1"),
            max_cooldown_s=_env_float("DOJO_COOLDOWN_MAX_S", "60"),
            timeout_s=None if timeout.lower() in ("", "none") else _env_float("DOJO_TIMEOUT_S", "30"),
        )
