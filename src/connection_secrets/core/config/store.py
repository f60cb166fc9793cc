"""Secret store configuration models.

:class:`SecretStoreConfig` keeps the persisted shape (a ``type`` tag and
one optional block per backend) and exposes the selected block through
:attr:`SecretStoreConfig.backend`, which yields exactly one of
:data:`StoreBackend`.  Blocks for backends other than the selected one
are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from connection_secrets.core.config.base import SecretStoreType, VaultAuthMethod, VaultKVVersion
from connection_secrets.core.config.credentials import (
    KubernetesAuthConfig,
    ServiceAccountTokenSourceConfig,
    VaultAuthTokenConfig,
    VaultCABundleConfig,
)
from connection_secrets.core.config.references import ConfigReference
from connection_secrets.core.config.serialization import WithInline, wire_field
from connection_secrets.core.exceptions import InvalidConfigError

DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"
"""Where Kubernetes mounts the pod's own service account token."""


@dataclass
class KubernetesSecretStoreConfig:
    """Configuration of a Kubernetes secret store."""

    auth: WithInline[KubernetesAuthConfig] = wire_field("auth")
    """Credentials used to connect to the Kubernetes API (required)"""


@dataclass
class VaultAuthKubernetesConfig:
    """Configuration for the Vault Kubernetes auth method."""

    role: str = wire_field("role")
    """Vault role bound to this workload's service account (required)"""

    mount_path: str = wire_field("mountPath", default="")
    """Mount path of the Kubernetes auth engine in Vault (optional)"""

    service_account_token_source: WithInline[ServiceAccountTokenSourceConfig] | None = wire_field(
        "serviceAccountTokenSource", default=None
    )
    """Where to read the service account token (default: the mounted token file)"""


@dataclass
class VaultAuthConfig:
    """Authentication to a Vault server."""

    method: VaultAuthMethod = wire_field("method")
    """Auth method to use (required)"""

    token: WithInline[VaultAuthTokenConfig] | None = wire_field("token", default=None)
    """Token auth configuration (optional)"""

    kubernetes: VaultAuthKubernetesConfig | None = wire_field("kubernetes", default=None)
    """Kubernetes auth configuration (optional)"""

    @property
    def selected(self) -> VaultAuthTokenConfig | VaultAuthKubernetesConfig:
        """The block matching :attr:`method`.

        Raises:
            InvalidConfigError: If that block is absent.
        """
        if self.method is VaultAuthMethod.TOKEN:
            block: VaultAuthTokenConfig | VaultAuthKubernetesConfig | None = self.token
        else:
            block = self.kubernetes
        if block is None:
            raise InvalidConfigError(
                f"{self.method.value} selected but no matching configuration block present",
                field=f"vault.auth.{self.method.value.lower()}",
            )
        return block


@dataclass(kw_only=True)
class VaultSecretStoreConfig:
    """Configuration of a Vault KV secret store.

    Deprecated in favour of running Vault behind the plugin store.
    """

    server: str = wire_field("server")
    """URL of the Vault server, e.g. ``https://vault.acme.org`` (required)"""

    namespace: str = wire_field("namespace", default="")
    """Vault namespace to operate in (optional)"""

    mount_path: str = wire_field("mountPath")
    """Mount path of the KV secrets engine (required)"""

    version: VaultKVVersion | None = wire_field("version", default=None)
    """KV engine version (default: v2)"""

    ca_bundle: WithInline[VaultCABundleConfig] | None = wire_field("caBundle", default=None)
    """CA bundle for verifying the server (optional)"""

    auth: VaultAuthConfig = wire_field("auth")
    """Authentication method configuration (required)"""

    @property
    def kv_version(self) -> VaultKVVersion:
        """The effective KV version, applying the default."""
        return self.version or VaultKVVersion.V2


@dataclass
class PluginStoreConfig:
    """Configuration of an external secret store plugin."""

    endpoint: str = wire_field("endpoint")
    """Address of the plugin's gRPC server (required)"""

    config_ref: ConfigReference = wire_field("configRef")
    """The plugin's own configuration object (required)"""


StoreBackend = Union[KubernetesSecretStoreConfig, VaultSecretStoreConfig, PluginStoreConfig]
"""The configuration block of exactly one secret store backend."""


@dataclass(kw_only=True)
class SecretStoreConfig:
    """Configuration of a secret store.

    ``default_scope`` is used for secrets of cluster-scoped resources:
    the namespace for Kubernetes stores and the parent path for Vault.
    """

    type: SecretStoreType | None = wire_field("type", default=None)
    """Which store to use (default: Kubernetes)"""

    default_scope: str = wire_field("defaultScope")
    """Default scope for cluster-scoped resources (required)"""

    kubernetes: KubernetesSecretStoreConfig | None = wire_field("kubernetes", default=None)
    """Kubernetes store configuration (optional, in-cluster configuration when absent)"""

    vault: VaultSecretStoreConfig | None = wire_field("vault", default=None)
    """Vault store configuration (optional, deprecated)"""

    plugin: PluginStoreConfig | None = wire_field("plugin", default=None)
    """Plugin store configuration (optional)"""

    @property
    def store_type(self) -> SecretStoreType:
        """The effective store type, applying the default."""
        return self.type or SecretStoreType.KUBERNETES

    @property
    def backend(self) -> StoreBackend:
        """The block selected by :attr:`store_type`.

        A Kubernetes store without a ``kubernetes`` block uses the
        in-cluster configuration.

        Raises:
            InvalidConfigError: If the selected Vault or Plugin block is absent.
        """
        store_type = self.store_type
        block: StoreBackend | None
        if store_type is SecretStoreType.KUBERNETES:
            block = self.kubernetes or KubernetesSecretStoreConfig(auth=KubernetesAuthConfig.none())
        elif store_type is SecretStoreType.VAULT:
            block = self.vault
        else:
            block = self.plugin
        if block is None:
            raise InvalidConfigError(
                f"{store_type.value} selected but no matching configuration block present",
                field=store_type.value.lower(),
            )
        return block

    def ignored_blocks(self) -> list[str]:
        """Wire names of populated blocks that the selected type ignores."""
        selected = self.store_type.value.lower()
        populated = {
            "kubernetes": self.kubernetes,
            "vault": self.vault,
            "plugin": self.plugin,
        }
        return [name for name, block in populated.items() if block is not None and name != selected]

    @classmethod
    def for_backend(cls, default_scope: str, backend: StoreBackend) -> SecretStoreConfig:
        """Build a config whose type tag always matches its only block."""
        if isinstance(backend, KubernetesSecretStoreConfig):
            return cls(default_scope=default_scope, type=SecretStoreType.KUBERNETES, kubernetes=backend)
        if isinstance(backend, VaultSecretStoreConfig):
            return cls(default_scope=default_scope, type=SecretStoreType.VAULT, vault=backend)
        return cls(default_scope=default_scope, type=SecretStoreType.PLUGIN, plugin=backend)
