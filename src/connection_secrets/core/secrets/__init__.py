"""Credential resolution, secret readers, and store dispatch."""

from connection_secrets.core.secrets.audit import CredentialAuditLogger
from connection_secrets.core.secrets.clients import vault_client_for
from connection_secrets.core.secrets.dispatch import (
    KubernetesStoreHandle,
    PluginStoreHandle,
    StoreDispatcher,
    StoreHandle,
    VaultKubernetesAuth,
    VaultStoreHandle,
    VaultTokenAuth,
    dispatch_store_config,
)
from connection_secrets.core.secrets.factory import build_audit_sink, build_dispatcher, build_registry
from connection_secrets.core.secrets.readers import InMemorySecretReader, MountedSecretReader, SecretReader
from connection_secrets.core.secrets.resolver import CredentialResolver, locator_for

__all__ = [
    "CredentialAuditLogger",
    "CredentialResolver",
    "InMemorySecretReader",
    "KubernetesStoreHandle",
    "MountedSecretReader",
    "PluginStoreHandle",
    "SecretReader",
    "StoreDispatcher",
    "StoreHandle",
    "VaultKubernetesAuth",
    "VaultStoreHandle",
    "VaultTokenAuth",
    "build_audit_sink",
    "build_dispatcher",
    "build_registry",
    "dispatch_store_config",
    "locator_for",
    "vault_client_for",
]
