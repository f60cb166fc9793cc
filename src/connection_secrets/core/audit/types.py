"""Audit events recorded while resolving secret store configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditAction(str, Enum):
    """Auditable actions on secret store configuration."""

    CREDENTIAL_RESOLVED = "credential_resolved"
    STORE_DISPATCHED = "store_dispatched"


class AuditStatus(str, Enum):
    """Audit event status.

    ``WARNING`` marks a credential the operator still has to create.
    """

    SUCCESS = "success"
    FAILURE = "failure"
    WARNING = "warning"


@dataclass
class AuditEvent:
    """A single audit event.

    Credential values never appear in an event; only where they were
    read from.

    Args:
        action: The action that occurred.
        actor: Who performed the action (e.g. controller name).
        resource: What was acted upon (e.g. ``Environment:VAULT_TOKEN``).
        status: Outcome of the action.
        timestamp: When the event occurred.
        metadata: Source, locator, store type and error details.
    """

    action: AuditAction
    actor: str
    resource: str
    status: AuditStatus
    timestamp: datetime = field(default_factory=_utcnow)
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def credential_resolved(
        cls,
        actor: str,
        source: str,
        locator: str,
        status: AuditStatus,
        error: str | None = None,
    ) -> AuditEvent:
        metadata = {"source": source, "locator": locator}
        if error is not None:
            metadata["error"] = error
        return cls(
            action=AuditAction.CREDENTIAL_RESOLVED,
            actor=actor,
            resource=f"{source}:{locator}",
            status=status,
            metadata=metadata,
        )

    @classmethod
    def store_dispatched(cls, actor: str, store_type: str, error: str | None = None) -> AuditEvent:
        metadata = {"type": store_type}
        if error is not None:
            metadata["error"] = error
        return cls(
            action=AuditAction.STORE_DISPATCHED,
            actor=actor,
            resource=store_type,
            status=AuditStatus.SUCCESS if error is None else AuditStatus.FAILURE,
            metadata=metadata,
        )

    @property
    def summary(self) -> str:
        """One-line ``action | actor | resource | status`` form."""
        return " | ".join((self.action.value, self.actor, self.resource, self.status.value))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "action": self.action.value,
            "actor": self.actor,
            "resource": self.resource,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }
