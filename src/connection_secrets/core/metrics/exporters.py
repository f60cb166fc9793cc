"""Metric registry adapters for Prometheus and OpenTelemetry.

Both libraries are imported when the adapter is constructed, so they
are only needed by deployments that use them::

    pip install connection-secrets[metrics]
"""

from __future__ import annotations

import threading
from typing import Any


def _prometheus_name(name: str) -> str:
    return name.replace(".", "_")


class PrometheusRegistry:
    """Adapter that forwards metrics to ``prometheus_client``.

    Counters map to :class:`~prometheus_client.Counter` and timers to
    :class:`~prometheus_client.Summary` observed in milliseconds.  Dots
    in metric names become underscores.  Label names come from the tag
    keys of the first call for a metric.

    Args:
        registry: ``prometheus_client`` collector registry to register
            with. Defaults to the global ``REGISTRY``.

    Raises:
        ImportError: If ``prometheus_client`` is not installed.
    """

    def __init__(self, registry: Any = None) -> None:
        try:
            import prometheus_client
        except ImportError:
            raise ImportError(
                "prometheus_client is required for PrometheusRegistry. Install it with: pip install prometheus-client"
            ) from None

        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._lock = threading.Lock()
        self._counters: dict[str, Any] = {}
        self._summaries: dict[str, Any] = {}

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            if name not in self._counters:
                from prometheus_client import Counter

                self._counters[name] = Counter(
                    _prometheus_name(name),
                    f"Counter {name}",
                    sorted(tags) if tags else [],
                    registry=self._registry,
                )
            metric = self._counters[name]
        (metric.labels(**tags) if tags else metric).inc(value)

    def timer(
        self,
        name: str,
        duration_ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            if name not in self._summaries:
                from prometheus_client import Summary

                self._summaries[name] = Summary(
                    _prometheus_name(name),
                    f"Timer {name} (ms)",
                    sorted(tags) if tags else [],
                    registry=self._registry,
                )
            metric = self._summaries[name]
        (metric.labels(**tags) if tags else metric).observe(duration_ms)

    def get_metrics(self) -> dict[str, Any]:
        """Return registered metric names grouped by kind."""
        with self._lock:
            return {"counters": list(self._counters), "timers": list(self._summaries)}


class OpenTelemetryRegistry:
    """Adapter that forwards metrics to OpenTelemetry.

    Counters map to OTel counters and timers to histograms recorded in
    milliseconds.

    Raises:
        ImportError: If ``opentelemetry-api`` is not installed.
    """

    def __init__(self, meter_name: str = "connection_secrets") -> None:
        try:
            from opentelemetry import metrics as otel_metrics
        except ImportError:
            raise ImportError(
                "opentelemetry-api is required for OpenTelemetryRegistry. "
                "Install it with: pip install opentelemetry-api"
            ) from None

        self._meter = otel_metrics.get_meter(meter_name)
        self._lock = threading.Lock()
        self._counters: dict[str, Any] = {}
        self._histograms: dict[str, Any] = {}

    def counter(
        self,
        name: str,
        value: float = 1.0,
        tags: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            if name not in self._counters:
                self._counters[name] = self._meter.create_counter(name)
            instrument = self._counters[name]
        instrument.add(value, attributes=tags or {})

    def timer(
        self,
        name: str,
        duration_ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            if name not in self._histograms:
                self._histograms[name] = self._meter.create_histogram(name, unit="ms")
            instrument = self._histograms[name]
        instrument.record(duration_ms, attributes=tags or {})

    def get_metrics(self) -> dict[str, Any]:
        """Return registered metric names grouped by kind."""
        with self._lock:
            return {"counters": list(self._counters), "timers": list(self._histograms)}
