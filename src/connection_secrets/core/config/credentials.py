"""Credential source configuration models.

A credential slot (Kubernetes auth, Vault token, Vault CA bundle, the
service account token used for Vault Kubernetes auth) is always
described the same way: a :class:`CredentialsSource` plus the selectors
locating the value for that source.  :class:`CredentialSourceConfig`
captures that shape once; the named subclasses exist so each slot keeps
its own type in the configuration tree.
"""

from __future__ import annotations

from dataclasses import dataclass

from connection_secrets.core.config.base import CredentialsSource
from connection_secrets.core.config.serialization import wire_field


@dataclass
class FsSelector:
    """Locates a credential in the local filesystem."""

    path: str = wire_field("path")
    """Path of the file holding the credential (required)"""


@dataclass
class EnvSelector:
    """Locates a credential in a process environment variable."""

    name: str = wire_field("name")
    """Name of the environment variable (required)"""


@dataclass(kw_only=True)
class SecretKeySelector:
    """Locates a key inside a referenced secret."""

    name: str = wire_field("name")
    """Name of the secret (required)"""

    namespace: str = wire_field("namespace", default="")
    """Namespace of the secret (default: the reader's own scope)"""

    key: str = wire_field("key")
    """Key within the secret data (required)"""

    @property
    def locator(self) -> str:
        """``namespace/name`` form used in logs and errors."""
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass
class CommonCredentialSelectors:
    """Selectors for every credential source.

    Only the selector matching the chosen source is consulted; the
    others are ignored.
    """

    fs: FsSelector | None = wire_field("fs", default=None)
    """Filesystem selector (optional)"""

    env: EnvSelector | None = wire_field("env", default=None)
    """Environment variable selector (optional)"""

    secret_ref: SecretKeySelector | None = wire_field("secretRef", default=None)
    """Secret key selector (optional)"""


@dataclass
class CredentialSourceConfig:
    """Where to read a single credential value from."""

    source: CredentialsSource = wire_field("source")
    """Source of the credential (required)"""

    selectors: CommonCredentialSelectors = wire_field(
        "selectors", inline=True, default_factory=CommonCredentialSelectors
    )
    """Selectors, flattened next to ``source`` on the wire"""

    @classmethod
    def none(cls) -> CredentialSourceConfig:
        return cls(source=CredentialsSource.NONE)

    @classmethod
    def from_env(cls, name: str) -> CredentialSourceConfig:
        return cls(
            source=CredentialsSource.ENVIRONMENT,
            selectors=CommonCredentialSelectors(env=EnvSelector(name=name)),
        )

    @classmethod
    def from_file(cls, path: str) -> CredentialSourceConfig:
        return cls(
            source=CredentialsSource.FILESYSTEM,
            selectors=CommonCredentialSelectors(fs=FsSelector(path=path)),
        )

    @classmethod
    def from_secret(cls, name: str, key: str, namespace: str = "") -> CredentialSourceConfig:
        return cls(
            source=CredentialsSource.SECRET,
            selectors=CommonCredentialSelectors(
                secret_ref=SecretKeySelector(name=name, key=key, namespace=namespace)
            ),
        )


@dataclass
class KubernetesAuthConfig(CredentialSourceConfig):
    """Credentials (a kubeconfig) used to reach a Kubernetes API."""


@dataclass
class VaultAuthTokenConfig(CredentialSourceConfig):
    """Token for the Vault Token auth method."""


@dataclass
class VaultCABundleConfig(CredentialSourceConfig):
    """PEM encoded CA bundle used to verify the Vault server."""


@dataclass
class ServiceAccountTokenSourceConfig(CredentialSourceConfig):
    """Service account token presented to Vault Kubernetes auth."""
