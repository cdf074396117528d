"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .auth import AuthenticatedExecutor, AuthState
from .client import DojoClient, error_from_response
from .coalescing import InFlightRegistry
from .contracts import CachePolicy, CooldownPolicy
from .cooldown import CooldownRecord, CooldownStatus, CooldownStore, parse_retry_after
from .credentials import CredentialStore
from .keys import RequestKey, build_request_key, endpoint_key

__all__ = [
    "DojoClient",
    "error_from_response",
    "AuthenticatedExecutor",
    "AuthState",
    "InFlightRegistry",
    "CachePolicy",
    "CooldownPolicy",
    "CooldownRecord",
    "CooldownStatus",
    "CooldownStore",
    "parse_retry_after",
    "CredentialStore",
    "RequestKey",
    "build_request_key",
    "endpoint_key",
]
