"""Static validation of secret store configuration.

Validation never reads a credential; it only checks that dispatch has
everything it needs.  Populated blocks for backends other than the
selected one are ignored at dispatch time, so by default they are only
reported as warnings.  ``strict=True`` turns them into errors.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from connection_secrets.core.config.base import CredentialsSource, SecretStoreType, VaultAuthMethod
from connection_secrets.core.config.connection import PublishConnectionDetailsTo
from connection_secrets.core.config.credentials import CredentialSourceConfig
from connection_secrets.core.config.store import SecretStoreConfig, VaultSecretStoreConfig

logger = logging.getLogger(__name__)


class ValidationPhase(str, enum.Enum):
    """Phase in which a validation error occurred."""

    REQUIRED_FIELDS = "required-fields"
    BACKEND_SELECTION = "backend-selection"
    CREDENTIAL_SOURCE = "credential-source"


@dataclass
class ValidationError:
    """A single validation error.

    Args:
        phase: The validation phase that produced this error.
        message: Human-readable error description.
        field: Wire path of the offending field, if applicable.
    """

    phase: ValidationPhase
    message: str
    field: str | None = None


@dataclass
class ValidationResult:
    """Outcome of a configuration validation.

    Args:
        errors: Issues that make dispatch fail.
        warnings: Non-fatal concerns worth noting.
    """

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return ``True`` if no errors were found."""
        return len(self.errors) == 0


_SELECTOR_FOR_SOURCE: dict[CredentialsSource, str] = {
    CredentialsSource.SECRET: "secretRef",
    CredentialsSource.ENVIRONMENT: "env",
    CredentialsSource.FILESYSTEM: "fs",
}


def _check_credential(result: ValidationResult, config: CredentialSourceConfig, path: str) -> None:
    selector = _SELECTOR_FOR_SOURCE.get(config.source)
    if selector is None:
        return
    selectors = config.selectors
    present = {
        "secretRef": selectors.secret_ref is not None,
        "env": selectors.env is not None,
        "fs": selectors.fs is not None,
    }
    if not present[selector]:
        result.errors.append(
            ValidationError(
                ValidationPhase.CREDENTIAL_SOURCE,
                f"{config.source.value} source requires a {selector} selector",
                field=f"{path}.{selector}",
            )
        )
    elif selectors.secret_ref is not None and config.source is CredentialsSource.SECRET:
        if not selectors.secret_ref.name or not selectors.secret_ref.key:
            result.errors.append(
                ValidationError(
                    ValidationPhase.CREDENTIAL_SOURCE,
                    "secretRef requires both name and key",
                    field=f"{path}.secretRef",
                )
            )


def _check_vault(result: ValidationResult, vault: VaultSecretStoreConfig) -> None:
    result.warnings.append("The Vault secret store is deprecated; run Vault behind the plugin store instead")

    if not vault.server:
        result.errors.append(ValidationError(ValidationPhase.REQUIRED_FIELDS, "server is empty", field="vault.server"))
    if not vault.mount_path:
        result.errors.append(
            ValidationError(ValidationPhase.REQUIRED_FIELDS, "mountPath is empty", field="vault.mountPath")
        )
    if vault.ca_bundle is not None:
        _check_credential(result, vault.ca_bundle, "vault.caBundle")

    auth = vault.auth
    if auth.method is VaultAuthMethod.TOKEN:
        if auth.token is None:
            result.errors.append(
                ValidationError(
                    ValidationPhase.BACKEND_SELECTION,
                    "Token selected but no matching configuration block present",
                    field="vault.auth.token",
                )
            )
        else:
            _check_credential(result, auth.token, "vault.auth.token")
        return

    if auth.kubernetes is None:
        result.errors.append(
            ValidationError(
                ValidationPhase.BACKEND_SELECTION,
                "Kubernetes selected but no matching configuration block present",
                field="vault.auth.kubernetes",
            )
        )
        return
    if not auth.kubernetes.role:
        result.errors.append(
            ValidationError(ValidationPhase.REQUIRED_FIELDS, "role is empty", field="vault.auth.kubernetes.role")
        )
    if auth.kubernetes.service_account_token_source is not None:
        _check_credential(
            result,
            auth.kubernetes.service_account_token_source,
            "vault.auth.kubernetes.serviceAccountTokenSource",
        )


def validate_store_config(config: SecretStoreConfig, strict: bool = False) -> ValidationResult:
    """Validate a secret store configuration without resolving credentials.

    Args:
        config: Store configuration to validate.
        strict: Report populated blocks of unselected backends as errors.

    Returns:
        A ``ValidationResult`` with errors and warnings.
    """
    result = ValidationResult()

    if not config.default_scope:
        result.errors.append(
            ValidationError(ValidationPhase.REQUIRED_FIELDS, "defaultScope is empty", field="defaultScope")
        )

    store_type = config.store_type
    for name in config.ignored_blocks():
        message = f"{name} block is ignored because type is {store_type.value}"
        if strict:
            result.errors.append(ValidationError(ValidationPhase.BACKEND_SELECTION, message, field=name))
        else:
            result.warnings.append(message)

    if store_type is SecretStoreType.KUBERNETES:
        if config.kubernetes is not None:
            _check_credential(result, config.kubernetes.auth, "kubernetes.auth")
    elif store_type is SecretStoreType.VAULT:
        if config.vault is None:
            result.errors.append(_missing_block(store_type))
        else:
            _check_vault(result, config.vault)
    else:
        plugin = config.plugin
        if plugin is None:
            result.errors.append(_missing_block(store_type))
        else:
            if not plugin.endpoint:
                result.errors.append(
                    ValidationError(ValidationPhase.REQUIRED_FIELDS, "endpoint is empty", field="plugin.endpoint")
                )
            ref = plugin.config_ref
            for wire_name, value in (("apiVersion", ref.api_version), ("kind", ref.kind), ("name", ref.name)):
                if not value:
                    result.errors.append(
                        ValidationError(
                            ValidationPhase.REQUIRED_FIELDS,
                            f"configRef.{wire_name} is empty",
                            field=f"plugin.configRef.{wire_name}",
                        )
                    )

    if not result.is_valid:
        logger.debug("Store config has %d validation error(s)", len(result.errors))
    return result


def _missing_block(store_type: SecretStoreType) -> ValidationError:
    return ValidationError(
        ValidationPhase.BACKEND_SELECTION,
        f"{store_type.value} selected but no matching configuration block present",
        field=store_type.value.lower(),
    )


def validate_publish_config(config: PublishConnectionDetailsTo) -> ValidationResult:
    """Validate a connection secret publishing configuration."""
    result = ValidationResult()
    if not config.name:
        result.errors.append(ValidationError(ValidationPhase.REQUIRED_FIELDS, "name is empty", field="name"))
    if config.config_ref is None:
        result.warnings.append("configRef not set; the 'default' store config will be used")
    return result
