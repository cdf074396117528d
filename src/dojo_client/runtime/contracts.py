"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed runtime policies for request coordination.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CachePolicy:
    """Response cache controls for GET calls."""

    enabled: bool = True
    ttl_s: float = 10.0


@dataclass(frozen=True, slots=True)
class CooldownPolicy:
    """Embargo durations applied after a 429 response."""

    default_s: float = 1.0
    max_s: float = 60.0

    def clamp(self, duration_s: float) -> float:
        return min(max(0.0, duration_s), self.max_s)
