"""Metrics collection and export abstractions."""

from connection_secrets.core.metrics.exporters import OpenTelemetryRegistry, PrometheusRegistry
from connection_secrets.core.metrics.registry import (
    CREDENTIAL_DURATION,
    CREDENTIAL_RESOLUTIONS,
    STORE_DISPATCHES,
    InMemoryRegistry,
    MeterRegistry,
)

__all__ = [
    "CREDENTIAL_DURATION",
    "CREDENTIAL_RESOLUTIONS",
    "InMemoryRegistry",
    "MeterRegistry",
    "OpenTelemetryRegistry",
    "PrometheusRegistry",
    "STORE_DISPATCHES",
]
