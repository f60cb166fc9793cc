"""Secret store configuration dispatch.

Dispatch selects the backend a :class:`SecretStoreConfig` points at and
resolves every credential that backend needs, producing one of the
immutable :data:`StoreHandle` variants.  A handle is everything an
external backend client needs; nothing here talks to the backend.

Plugin stores are passed through untouched: the plugin authenticates
with its own configuration, referenced by ``config_ref``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from connection_secrets.core.audit.sinks import AuditSink
from connection_secrets.core.audit.types import AuditEvent
from connection_secrets.core.config.base import SecretStoreType, VaultKVVersion
from connection_secrets.core.config.credentials import ServiceAccountTokenSourceConfig
from connection_secrets.core.config.references import ConfigReference
from connection_secrets.core.config.store import (
    DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH,
    KubernetesSecretStoreConfig,
    PluginStoreConfig,
    SecretStoreConfig,
    VaultAuthKubernetesConfig,
    VaultSecretStoreConfig,
)
from connection_secrets.core.exceptions import SecretStoreError
from connection_secrets.core.metrics.registry import STORE_DISPATCHES, MeterRegistry
from connection_secrets.core.secrets.audit import CredentialAuditLogger
from connection_secrets.core.secrets.resolver import CredentialResolver
from connection_secrets.core.utils import safe_call

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KubernetesStoreHandle:
    """Resolved Kubernetes store: scope plus kubeconfig bytes.

    An empty ``kubeconfig`` means the in-cluster configuration.
    """

    default_scope: str
    kubeconfig: bytes = field(repr=False)

    @property
    def store_type(self) -> SecretStoreType:
        return SecretStoreType.KUBERNETES


@dataclass(frozen=True)
class VaultTokenAuth:
    """Resolved Vault token auth."""

    token: bytes = field(repr=False)


@dataclass(frozen=True)
class VaultKubernetesAuth:
    """Resolved Vault Kubernetes auth: role, mount path and the JWT to present."""

    role: str
    mount_path: str
    service_account_token: bytes = field(repr=False)


VaultAuth = Union[VaultTokenAuth, VaultKubernetesAuth]


@dataclass(frozen=True)
class VaultStoreHandle:
    """Resolved Vault store."""

    default_scope: str
    server: str
    mount_path: str
    version: VaultKVVersion
    auth: VaultAuth
    namespace: str = ""
    ca_bundle: bytes | None = field(default=None, repr=False)

    @property
    def store_type(self) -> SecretStoreType:
        return SecretStoreType.VAULT


@dataclass(frozen=True)
class PluginStoreHandle:
    """Unresolved plugin store, handed to the plugin client as-is."""

    default_scope: str
    config: PluginStoreConfig

    @property
    def store_type(self) -> SecretStoreType:
        return SecretStoreType.PLUGIN

    @property
    def endpoint(self) -> str:
        return self.config.endpoint

    @property
    def config_ref(self) -> ConfigReference:
        return self.config.config_ref


StoreHandle = Union[KubernetesStoreHandle, VaultStoreHandle, PluginStoreHandle]
"""A secret store backend with all locally resolvable credentials resolved."""


class StoreDispatcher:
    """Resolve :class:`SecretStoreConfig` objects into :data:`StoreHandle` values.

    Args:
        resolver: Resolver used for every credential slot.
        default_token_path: Service account token file used by Vault
            Kubernetes auth when no token source is configured.
        registry: Optional meter registry for dispatch counts.
        audit_sink: Optional sink receiving one event per dispatch.
        actor: Actor name recorded in audit events.
    """

    def __init__(
        self,
        resolver: CredentialResolver | CredentialAuditLogger,
        *,
        default_token_path: str = DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH,
        registry: MeterRegistry | None = None,
        audit_sink: AuditSink | None = None,
        actor: str = "store_dispatcher",
    ) -> None:
        self._resolver = resolver
        self._default_token_path = default_token_path
        self._registry = registry
        self._audit_sink = audit_sink
        self._actor = actor

    def dispatch(self, config: SecretStoreConfig) -> StoreHandle:
        """Select the configured backend and resolve its credentials.

        The first failing resolution aborts the dispatch.

        Raises:
            InvalidConfigError: The block for the selected type or auth
                method is absent, or a selector is missing.
            CredentialNotFoundError: A referenced credential does not exist.
            CredentialReadError: A credential could not be read.
        """
        store_type = config.store_type
        ignored = config.ignored_blocks()
        if ignored:
            logger.debug("Ignoring %s block(s) for %s store", ", ".join(ignored), store_type.value)

        try:
            handle = self._dispatch(config)
        except SecretStoreError as exc:
            self._observe(store_type, "failure", str(exc))
            raise
        self._observe(store_type, "success")
        return handle

    def _dispatch(self, config: SecretStoreConfig) -> StoreHandle:
        backend = config.backend
        if isinstance(backend, KubernetesSecretStoreConfig):
            return KubernetesStoreHandle(
                default_scope=config.default_scope,
                kubeconfig=self._resolver.resolve(backend.auth),
            )
        if isinstance(backend, VaultSecretStoreConfig):
            return self._dispatch_vault(config.default_scope, backend)
        return PluginStoreHandle(default_scope=config.default_scope, config=backend)

    def _dispatch_vault(self, default_scope: str, vault: VaultSecretStoreConfig) -> VaultStoreHandle:
        logger.warning("Vault secret store %s is deprecated; run Vault behind the plugin store", vault.server)

        selected = vault.auth.selected
        auth: VaultAuth
        if isinstance(selected, VaultAuthKubernetesConfig):
            auth = self._vault_kubernetes_auth(selected)
        else:
            auth = VaultTokenAuth(token=self._resolver.resolve(selected))

        ca_bundle = None
        if vault.ca_bundle is not None:
            ca_bundle = self._resolver.resolve(vault.ca_bundle)

        return VaultStoreHandle(
            default_scope=default_scope,
            server=vault.server,
            namespace=vault.namespace,
            mount_path=vault.mount_path,
            version=vault.kv_version,
            auth=auth,
            ca_bundle=ca_bundle,
        )

    def _vault_kubernetes_auth(self, config: VaultAuthKubernetesConfig) -> VaultKubernetesAuth:
        token_source = config.service_account_token_source
        if token_source is None:
            token_source = ServiceAccountTokenSourceConfig.from_file(self._default_token_path)
        return VaultKubernetesAuth(
            role=config.role,
            mount_path=config.mount_path,
            service_account_token=self._resolver.resolve(token_source),
        )

    def _observe(self, store_type: SecretStoreType, outcome: str, error: str | None = None) -> None:
        registry = self._registry
        if registry is not None:
            safe_call(
                lambda: registry.counter(STORE_DISPATCHES, tags={"type": store_type.value, "outcome": outcome}),
                logger,
                "Failed to record dispatch metric for %s store",
                store_type.value,
            )

        sink = self._audit_sink
        if sink is None:
            return
        event = AuditEvent.store_dispatched(self._actor, store_type.value, error)
        safe_call(lambda: sink.emit(event), logger, "Failed to emit audit event for %s store", store_type.value)


def dispatch_store_config(
    config: SecretStoreConfig,
    resolver: CredentialResolver | CredentialAuditLogger,
    *,
    default_token_path: str = DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH,
) -> StoreHandle:
    """Dispatch *config* with a one-off :class:`StoreDispatcher`."""
    return StoreDispatcher(resolver, default_token_path=default_token_path).dispatch(config)
