"""Meter registry protocol and in-memory implementation.

Credential resolution and store dispatch report counters and timings
through a :class:`MeterRegistry`.  :class:`InMemoryRegistry` keeps them
in memory for tests and local debugging; the adapters in
:mod:`connection_secrets.core.metrics.exporters` forward them to
Prometheus or OpenTelemetry.
"""

from __future__ import annotations

import threading
from typing import Any, Protocol, runtime_checkable

CREDENTIAL_RESOLUTIONS = "css.credential.resolutions"
CREDENTIAL_DURATION = "css.credential.duration"
STORE_DISPATCHES = "css.store.dispatches"


@runtime_checkable
class MeterRegistry(Protocol):
    """Protocol for recording metrics. Implementations must be thread-safe."""

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric.

        Args:
            name: Metric name (e.g. ``"css.credential.resolutions"``).
            value: Amount to increment by.
            tags: Optional key-value tags for dimensionality.
        """
        ...

    def timer(
        self,
        name: str,
        duration_ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a timing measurement in milliseconds."""
        ...

    def get_metrics(self) -> dict[str, Any]:
        """Return a snapshot of all recorded metrics."""
        ...


def _tag_key(tags: dict[str, str] | None) -> str:
    if not tags:
        return ""
    return ",".join(f"{k}={v}" for k, v in sorted(tags.items()))


class InMemoryRegistry:
    """Thread-safe in-memory metrics registry."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, dict[str, float]] = {}
        self._timers: dict[str, dict[str, list[float]]] = {}

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        key = _tag_key(tags)
        with self._lock:
            bucket = self._counters.setdefault(name, {})
            bucket[key] = bucket.get(key, 0.0) + value

    def timer(
        self,
        name: str,
        duration_ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        key = _tag_key(tags)
        with self._lock:
            self._timers.setdefault(name, {}).setdefault(key, []).append(duration_ms)

    def get_metrics(self) -> dict[str, Any]:
        """Return ``{"counters": ..., "timers": ...}`` keyed by metric name and tag key."""
        with self._lock:
            return {
                "counters": {name: dict(buckets) for name, buckets in self._counters.items()},
                "timers": {
                    name: {key: {"total_ms": sum(samples), "count": len(samples)} for key, samples in buckets.items()}
                    for name, buckets in self._timers.items()
                },
            }

    def get_counter(self, name: str, tags: dict[str, str] | None = None) -> float:
        """Current counter value, or ``0.0`` if never incremented."""
        key = _tag_key(tags)
        with self._lock:
            return self._counters.get(name, {}).get(key, 0.0)

    def get_timer_count(self, name: str, tags: dict[str, str] | None = None) -> int:
        """Number of recordings for a timer, or ``0``."""
        key = _tag_key(tags)
        with self._lock:
            return len(self._timers.get(name, {}).get(key, []))

    def reset(self) -> None:
        """Clear all recorded metrics."""
        with self._lock:
            self._counters.clear()
            self._timers.clear()
