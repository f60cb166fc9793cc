"""Runtime settings for the resolver and its observability hooks."""

from dataclasses import dataclass

from connection_secrets.core.config.base import LogFormat, LogLevel, MetricsBackend
from connection_secrets.core.config.store import DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: LogLevel = LogLevel.INFO
    """Logging level (default: INFO)"""

    format: LogFormat = LogFormat.TEXT
    """Log output format (default: text)"""

    output: str = "stderr"
    """Log destination - stdout, stderr, or a file path (default: stderr)"""


@dataclass
class MetricsConfig:
    """Configuration for resolution metrics."""

    enabled: bool = True
    """Enable metrics collection (default: True)"""

    backend: MetricsBackend = MetricsBackend.MEMORY
    """Metrics backend to use (default: memory)"""


@dataclass
class AuditConfig:
    """Configuration for the credential access audit trail."""

    enabled: bool = True
    """Enable audit events (default: True)"""

    audit_trail_path: str | None = None
    """JSON-lines file for audit events; logging only when unset (optional)"""

    actor: str = "connection-secrets"
    """Actor name recorded in audit events (default: connection-secrets)"""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.actor:
            raise ValueError("actor is required")


@dataclass
class ResolverSettings:
    """Settings for resolving secret store configurations."""

    default_token_path: str = DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH
    """Service account token used by Vault Kubernetes auth when no source is set"""

    secrets_mount_root: str | None = None
    """Directory of mounted secrets backing ``Secret`` sources (optional)"""

    default_namespace: str = "default"
    """Namespace for secret selectors that omit one (default: default)"""

    logging: LoggingConfig = None  # type: ignore
    """Logging configuration"""

    metrics: MetricsConfig | None = None
    """Metrics configuration (optional)"""

    audit: AuditConfig | None = None
    """Audit configuration (optional)"""

    def __post_init__(self) -> None:
        """Validate configuration and fill in default logging."""
        if not self.default_token_path:
            raise ValueError("default_token_path is required")
        if not self.default_namespace:
            raise ValueError("default_namespace is required")
        if self.logging is None:
            self.logging = LoggingConfig()
