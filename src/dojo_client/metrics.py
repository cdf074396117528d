"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for request-coordination observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class RequestMetrics(Protocol):
    """Minimal metrics interface for client instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpRequestMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        del name, value, tags


_DESCRIPTIONS: dict[str, str] = {
    "cache_hits": "GET calls answered from the response cache",
    "coalesced_waits": "Calls that joined an identical in-flight request",
    "cooldown_rejections": "Calls refused because the endpoint is cooling down",
    "dispatches": "Requests sent over the transport",
    "rate_limited": "429 responses that opened a cooldown",
    "token_refreshes": "Refresh-token exchanges attempted",
    "token_refresh_failures": "Refresh-token exchanges that did not yield a pair",
}


class PrometheusRequestMetrics(RequestMetrics):
    """
    Prometheus-backed metrics adapter.

    Each ``incr`` name becomes a ``Counter`` (exposed with the ``_total``
    suffix). Counters are registered lazily, one per name and label set,
    so the registry only carries what the client actually reported.

    Args:
        namespace: Metric name prefix.
        registry: Collector registry; the process default when omitted.
    """

    def __init__(self, *, namespace: str = "dojo_client", registry: Any | None = None) -> None:
        try:
            import prometheus_client
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusRequestMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._prom = prometheus_client
        self._namespace = namespace
        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._counters: dict[tuple[str, tuple[str, ...]], Any] = {}

    def _counter(self, name: str, label_names: tuple[str, ...]) -> Any:
        counter = self._counters.get((name, label_names))
        if counter is not None:
            return counter
        counter = self._prom.Counter(
            name,
            _DESCRIPTIONS.get(name, name.replace("_", " ")),
            labelnames=label_names,
            namespace=self._namespace,
            registry=self._registry,
        )
        self._counters[(name, label_names)] = counter
        return counter

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        labels = {key: str(val) for key, val in (tags or {}).items()}
        counter = self._counter(name, tuple(sorted(labels)))
        if labels:
            counter = counter.labels(**labels)
        counter.inc(value)
