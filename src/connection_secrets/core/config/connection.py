"""Connection secret publishing configuration and owner tagging.

Ownership of a connection secret is tracked with a label rather than
with owner references, so every secret store implementation can support
it as long as it can set and read labels.
"""

from __future__ import annotations

from dataclasses import dataclass

from connection_secrets.core.config.base import SecretType
from connection_secrets.core.config.references import DEFAULT_STORE_CONFIG_NAME, Reference
from connection_secrets.core.config.serialization import wire_field
from connection_secrets.core.exceptions import InvalidConfigError

LABEL_KEY_OWNER_UID = "secret.crossplane.io/owner-uid"
"""Label holding the UID of the resource that owns a connection secret.

Written only through :func:`set_owner_uid`; other actors should not
rewrite it.
"""


@dataclass
class ConnectionSecretMetadata:
    """Metadata stamped onto a generated connection secret."""

    labels: dict[str, str] | None = wire_field("labels", default=None)
    """Labels/tags for the secret; ``metadata.labels`` for Kubernetes (optional)"""

    annotations: dict[str, str] | None = wire_field("annotations", default=None)
    """Annotations for the secret; ``metadata.annotations`` for Kubernetes (optional)"""

    type: SecretType | None = wire_field("type", default=None)
    """Secret type, only honoured by Kubernetes stores (optional)"""

    def set_owner_uid(self, uid: str) -> None:
        """Stamp the owner UID label, creating the label map if needed."""
        set_owner_uid(self, uid)

    def get_owner_uid(self) -> str:
        """Return the owner UID label, or ``""`` if it is not set."""
        return get_owner_uid(self)


def set_owner_uid(metadata: ConnectionSecretMetadata, uid: str) -> None:
    """Upsert the owner UID label on *metadata*.

    Any previous owner UID is overwritten and all other labels are left
    untouched.  Not safe for concurrent writers on the same instance.
    """
    if metadata.labels is None:
        metadata.labels = {}
    metadata.labels[LABEL_KEY_OWNER_UID] = str(uid)


def get_owner_uid(metadata: ConnectionSecretMetadata) -> str:
    """Return the owner UID stored on *metadata*, or ``""``."""
    if metadata.labels is None:
        return ""
    return metadata.labels.get(LABEL_KEY_OWNER_UID, "")


@dataclass
class PublishConnectionDetailsTo:
    """Where a resource publishes its connection secret."""

    name: str = wire_field("name")
    """Name of the connection secret (required)"""

    metadata: ConnectionSecretMetadata | None = wire_field("metadata", default=None)
    """Metadata for the connection secret (optional)"""

    config_ref: Reference | None = wire_field("configRef", default=None)
    """Store config to publish with (default: ``{"name": "default"}``)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.name:
            raise InvalidConfigError("name is required", field="name")

    @property
    def store_config_ref(self) -> Reference:
        """The effective store config reference, applying the default."""
        if self.config_ref is None:
            return Reference(name=DEFAULT_STORE_CONFIG_NAME)
        return self.config_ref
