"""Secret store configuration and credential resolution exceptions.

Every failure raised by this package derives from :class:`SecretStoreError`
so callers can tell "fix the configuration" (:class:`InvalidConfigError`)
apart from "retry later" (:class:`CredentialReadError`) and "something the
operator must create" (:class:`CredentialNotFoundError`).
"""


class SecretStoreError(Exception):
    """Base exception for secret store configuration errors."""

    pass


class InvalidConfigError(SecretStoreError):
    """Configuration is structurally unusable and must be fixed.

    Args:
        message: Human-readable description.
        field: Wire path of the offending field, if known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class CredentialNotFoundError(SecretStoreError):
    """A referenced secret or environment variable does not exist."""

    def __init__(self, source: str, locator: str, message: str | None = None) -> None:
        self.source = source
        self.locator = locator
        super().__init__(message or f"{source} credential '{locator}' not found")


class SecretKeyNotFoundError(CredentialNotFoundError):
    """The referenced secret exists but does not contain the requested key."""

    def __init__(self, locator: str, key: str) -> None:
        self.key = key
        super().__init__("Secret", locator, f"key '{key}' not found in secret '{locator}'")


class CredentialReadError(SecretStoreError):
    """Reading a credential failed in the underlying collaborator."""

    def __init__(self, source: str, locator: str, cause: Exception) -> None:
        self.source = source
        self.locator = locator
        self.cause = cause
        super().__init__(f"Failed to read {source} credential '{locator}': {cause}")
        self.__cause__ = cause
