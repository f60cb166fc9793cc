"""Configuration models for connection secret stores.

This package provides the dataclass models describing where connection
secrets are published, which secret store backend holds them, and where
each credential needed to reach that backend comes from.
"""

from connection_secrets.core.config.base import (
    CredentialsSource,
    LogFormat,
    LogLevel,
    MetricsBackend,
    SecretStoreType,
    SecretType,
    VaultAuthMethod,
    VaultKVVersion,
)
from connection_secrets.core.config.connection import (
    LABEL_KEY_OWNER_UID,
    ConnectionSecretMetadata,
    PublishConnectionDetailsTo,
    get_owner_uid,
    set_owner_uid,
)
from connection_secrets.core.config.credentials import (
    CommonCredentialSelectors,
    CredentialSourceConfig,
    EnvSelector,
    FsSelector,
    KubernetesAuthConfig,
    SecretKeySelector,
    ServiceAccountTokenSourceConfig,
    VaultAuthTokenConfig,
    VaultCABundleConfig,
)
from connection_secrets.core.config.loader import (
    load_from_env,
    load_from_file,
    load_from_string,
    load_publish_config,
    load_store_config,
    load_wire_from_file,
    load_wire_from_string,
)
from connection_secrets.core.config.references import DEFAULT_STORE_CONFIG_NAME, ConfigReference, Reference
from connection_secrets.core.config.serialization import from_wire, to_wire
from connection_secrets.core.config.settings import AuditConfig, LoggingConfig, MetricsConfig, ResolverSettings
from connection_secrets.core.config.store import (
    DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH,
    KubernetesSecretStoreConfig,
    PluginStoreConfig,
    SecretStoreConfig,
    StoreBackend,
    VaultAuthConfig,
    VaultAuthKubernetesConfig,
    VaultSecretStoreConfig,
)
from connection_secrets.core.config.validator import (
    ValidationError,
    ValidationPhase,
    ValidationResult,
    validate_publish_config,
    validate_store_config,
)

__all__ = [
    "AuditConfig",
    "CommonCredentialSelectors",
    "ConfigReference",
    "ConnectionSecretMetadata",
    "CredentialSourceConfig",
    "CredentialsSource",
    "DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH",
    "DEFAULT_STORE_CONFIG_NAME",
    "EnvSelector",
    "FsSelector",
    "KubernetesAuthConfig",
    "KubernetesSecretStoreConfig",
    "LABEL_KEY_OWNER_UID",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MetricsBackend",
    "MetricsConfig",
    "PluginStoreConfig",
    "PublishConnectionDetailsTo",
    "Reference",
    "ResolverSettings",
    "SecretKeySelector",
    "SecretStoreConfig",
    "SecretStoreType",
    "SecretType",
    "ServiceAccountTokenSourceConfig",
    "StoreBackend",
    "ValidationError",
    "ValidationPhase",
    "ValidationResult",
    "VaultAuthConfig",
    "VaultAuthKubernetesConfig",
    "VaultAuthMethod",
    "VaultAuthTokenConfig",
    "VaultCABundleConfig",
    "VaultKVVersion",
    "VaultSecretStoreConfig",
    "from_wire",
    "get_owner_uid",
    "load_from_env",
    "load_from_file",
    "load_from_string",
    "load_publish_config",
    "load_store_config",
    "load_wire_from_file",
    "load_wire_from_string",
    "set_owner_uid",
    "to_wire",
    "validate_publish_config",
    "validate_store_config",
]
