"""Build a dispatcher and its collaborators from :class:`ResolverSettings`."""

from __future__ import annotations

import logging

from connection_secrets.core.audit.sinks import AuditSink, CompositeAuditSink, FileAuditSink, LoggingAuditSink
from connection_secrets.core.config.base import MetricsBackend
from connection_secrets.core.config.settings import AuditConfig, MetricsConfig, ResolverSettings
from connection_secrets.core.metrics.exporters import OpenTelemetryRegistry, PrometheusRegistry
from connection_secrets.core.metrics.registry import InMemoryRegistry, MeterRegistry
from connection_secrets.core.secrets.audit import CredentialAuditLogger
from connection_secrets.core.secrets.dispatch import StoreDispatcher
from connection_secrets.core.secrets.readers import MountedSecretReader, SecretReader
from connection_secrets.core.secrets.resolver import CredentialResolver

logger = logging.getLogger(__name__)


def build_registry(config: MetricsConfig | None) -> MeterRegistry | None:
    """Create the meter registry selected by *config*, if metrics are enabled."""
    if config is None or not config.enabled:
        return None
    if config.backend is MetricsBackend.PROMETHEUS:
        return PrometheusRegistry()
    if config.backend is MetricsBackend.OPENTELEMETRY:
        return OpenTelemetryRegistry()
    return InMemoryRegistry()


def build_audit_sink(config: AuditConfig | None) -> AuditSink | None:
    """Create the audit sink described by *config*, if auditing is enabled."""
    if config is None or not config.enabled:
        return None
    if config.audit_trail_path:
        return CompositeAuditSink(LoggingAuditSink(), FileAuditSink(config.audit_trail_path))
    return LoggingAuditSink()


def build_dispatcher(
    settings: ResolverSettings,
    secret_reader: SecretReader | None = None,
    registry: MeterRegistry | None = None,
) -> StoreDispatcher:
    """Wire a :class:`StoreDispatcher` according to *settings*.

    Args:
        settings: Resolver settings.
        secret_reader: Reader for ``Secret`` sources. Defaults to a
            :class:`MountedSecretReader` when ``secrets_mount_root`` is set.
        registry: Meter registry overriding ``settings.metrics``.
    """
    if secret_reader is None and settings.secrets_mount_root:
        secret_reader = MountedSecretReader(settings.secrets_mount_root, settings.default_namespace)
    if registry is None:
        registry = build_registry(settings.metrics)

    resolver: CredentialResolver | CredentialAuditLogger = CredentialResolver(secret_reader, registry=registry)
    sink = build_audit_sink(settings.audit)
    actor = settings.audit.actor if settings.audit is not None else "store_dispatcher"
    if sink is not None:
        resolver = CredentialAuditLogger(resolver, sink, actor=actor)

    logger.debug(
        "Built dispatcher (secret reader: %s, metrics: %s, audit: %s)",
        type(secret_reader).__name__ if secret_reader else "none",
        type(registry).__name__ if registry else "none",
        type(sink).__name__ if sink else "none",
    )
    return StoreDispatcher(
        resolver,
        default_token_path=settings.default_token_path,
        registry=registry,
        audit_sink=sink,
        actor=actor,
    )
