"""Audit-aware wrapper for credential resolution."""

from __future__ import annotations

import logging

from connection_secrets.core.audit.sinks import AuditSink
from connection_secrets.core.audit.types import AuditEvent, AuditStatus
from connection_secrets.core.config.credentials import CredentialSourceConfig
from connection_secrets.core.exceptions import CredentialNotFoundError, SecretStoreError
from connection_secrets.core.secrets.resolver import CredentialResolver, locator_for
from connection_secrets.core.utils import safe_call

logger = logging.getLogger(__name__)


class CredentialAuditLogger:
    """Decorator that emits an audit event for every credential resolution.

    The resolved value is **never** part of the event.  Missing
    credentials are recorded as warnings, every other failure as a
    failure; the original exception is re-raised either way.

    Args:
        resolver: The underlying resolver to delegate to.
        sink: Audit sink that receives the events.
        actor: Actor name recorded in audit events.
    """

    def __init__(
        self,
        resolver: CredentialResolver,
        sink: AuditSink,
        actor: str = "credential_resolver",
    ) -> None:
        self._resolver = resolver
        self._sink = sink
        self._actor = actor

    def resolve(self, config: CredentialSourceConfig) -> bytes:
        """Resolve a credential and emit an audit event."""
        try:
            value = self._resolver.resolve(config)
        except CredentialNotFoundError as exc:
            self._emit(config, AuditStatus.WARNING, str(exc))
            raise
        except SecretStoreError as exc:
            self._emit(config, AuditStatus.FAILURE, str(exc))
            raise
        self._emit(config, AuditStatus.SUCCESS)
        return value

    def _emit(self, config: CredentialSourceConfig, status: AuditStatus, error: str | None = None) -> None:
        locator = locator_for(config)
        event = AuditEvent.credential_resolved(self._actor, config.source.value, locator, status, error)
        safe_call(
            lambda: self._sink.emit(event),
            logger,
            "Failed to emit audit event for %s credential %s",
            config.source.value,
            locator,
        )
