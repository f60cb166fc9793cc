"""Base types and enums for configuration models."""

from enum import Enum


class SecretStoreType(str, Enum):
    """Secret store backends."""

    KUBERNETES = "Kubernetes"
    VAULT = "Vault"
    PLUGIN = "Plugin"


class CredentialsSource(str, Enum):
    """Origins a credential value can be read from."""

    NONE = "None"
    SECRET = "Secret"
    ENVIRONMENT = "Environment"
    FILESYSTEM = "Filesystem"


class VaultAuthMethod(str, Enum):
    """Vault authentication methods."""

    TOKEN = "Token"
    KUBERNETES = "Kubernetes"


class VaultKVVersion(str, Enum):
    """API version of the Vault KV secrets engine."""

    V1 = "v1"
    V2 = "v2"


class SecretType(str, Enum):
    """Kubernetes secret types for connection secrets."""

    OPAQUE = "Opaque"
    SERVICE_ACCOUNT_TOKEN = "kubernetes.io/service-account-token"
    DOCKERCFG = "kubernetes.io/dockercfg"
    DOCKER_CONFIG_JSON = "kubernetes.io/dockerconfigjson"
    BASIC_AUTH = "kubernetes.io/basic-auth"
    SSH_AUTH = "kubernetes.io/ssh-auth"
    TLS = "kubernetes.io/tls"
    BOOTSTRAP_TOKEN = "bootstrap.kubernetes.io/token"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    TEXT = "text"


class MetricsBackend(str, Enum):
    """Metrics collection backends."""

    PROMETHEUS = "prometheus"
    OPENTELEMETRY = "opentelemetry"
    MEMORY = "memory"
