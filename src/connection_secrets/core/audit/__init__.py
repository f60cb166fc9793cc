"""Audit event types, sinks, and configuration filters."""

from connection_secrets.core.audit.filters import ConfigFilter
from connection_secrets.core.audit.sinks import (
    AuditSink,
    CompositeAuditSink,
    FileAuditSink,
    LoggingAuditSink,
)
from connection_secrets.core.audit.types import (
    AuditAction,
    AuditEvent,
    AuditStatus,
)

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditSink",
    "AuditStatus",
    "CompositeAuditSink",
    "ConfigFilter",
    "FileAuditSink",
    "LoggingAuditSink",
]
