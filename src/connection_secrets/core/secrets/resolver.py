"""Credential source resolution.

:class:`CredentialResolver` turns any :class:`CredentialSourceConfig`
into the bytes it points at.  The same resolver serves every credential
slot in the store configuration; it holds no cache and never retries.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Mapping

from connection_secrets.core.config.base import CredentialsSource
from connection_secrets.core.config.credentials import CredentialSourceConfig
from connection_secrets.core.exceptions import (
    CredentialNotFoundError,
    CredentialReadError,
    InvalidConfigError,
    SecretKeyNotFoundError,
    SecretStoreError,
)
from connection_secrets.core.metrics.registry import CREDENTIAL_DURATION, CREDENTIAL_RESOLUTIONS, MeterRegistry
from connection_secrets.core.secrets.readers import SecretReader
from connection_secrets.core.utils import safe_call

logger = logging.getLogger(__name__)

_OUTCOMES: dict[type[SecretStoreError], str] = {
    SecretKeyNotFoundError: "key_not_found",
    CredentialNotFoundError: "not_found",
    CredentialReadError: "read_error",
    InvalidConfigError: "invalid_config",
}


def locator_for(config: CredentialSourceConfig) -> str:
    """Describe where *config* reads from, without any credential value."""
    selectors = config.selectors
    if config.source is CredentialsSource.ENVIRONMENT and selectors.env is not None:
        return selectors.env.name
    if config.source is CredentialsSource.FILESYSTEM and selectors.fs is not None:
        return selectors.fs.path
    if config.source is CredentialsSource.SECRET and selectors.secret_ref is not None:
        return f"{selectors.secret_ref.locator}#{selectors.secret_ref.key}"
    return ""


def _outcome(exc: SecretStoreError) -> str:
    for exc_type in type(exc).__mro__:
        if exc_type in _OUTCOMES:
            return _OUTCOMES[exc_type]
    return "error"


class CredentialResolver:
    """Resolve credential sources against the environment, filesystem and secrets.

    Args:
        secret_reader: Collaborator used for ``Secret`` sources.
        environ: Environment mapping. Defaults to ``os.environ`` read at
            resolution time.
        registry: Optional meter registry for resolution counts and timings.
        clock: Injectable monotonic clock in seconds, for testing.
    """

    def __init__(
        self,
        secret_reader: SecretReader | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        registry: MeterRegistry | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._secret_reader = secret_reader
        self._environ = environ
        self._registry = registry
        self._clock = clock or time.perf_counter

    def resolve(self, config: CredentialSourceConfig) -> bytes:
        """Return the credential *config* points at.

        ``None`` sources resolve to ``b""``.

        Raises:
            InvalidConfigError: The selector for the chosen source is missing.
            CredentialNotFoundError: The variable or secret does not exist.
            SecretKeyNotFoundError: The secret exists without the key.
            CredentialReadError: A file or the secret reader could not be read.
        """
        started = self._clock()
        try:
            value = self._resolve(config)
        except SecretStoreError as exc:
            self._record(config.source, _outcome(exc), started)
            raise
        self._record(config.source, "success", started)
        logger.debug("Resolved %s credential %s", config.source.value, locator_for(config))
        return value

    def _resolve(self, config: CredentialSourceConfig) -> bytes:
        source = config.source
        selectors = config.selectors

        if source is CredentialsSource.NONE:
            return b""

        if source is CredentialsSource.ENVIRONMENT:
            if selectors.env is None:
                raise InvalidConfigError("Environment source requires an env selector", field="env")
            environ = os.environ if self._environ is None else self._environ
            value = environ.get(selectors.env.name)
            if value is None:
                raise CredentialNotFoundError(source.value, selectors.env.name)
            return os.fsencode(value)

        if source is CredentialsSource.FILESYSTEM:
            if selectors.fs is None:
                raise InvalidConfigError("Filesystem source requires an fs selector", field="fs")
            try:
                with open(selectors.fs.path, "rb") as fh:
                    return fh.read()
            except OSError as exc:
                raise CredentialReadError(source.value, selectors.fs.path, exc) from exc

        if source is CredentialsSource.SECRET:
            ref = selectors.secret_ref
            if ref is None:
                raise InvalidConfigError("Secret source requires a secretRef selector", field="secretRef")
            if self._secret_reader is None:
                raise InvalidConfigError("Secret source requires a secret reader", field="secretRef")
            data = self._secret_reader.read(ref.namespace, ref.name)
            if data is None:
                raise CredentialNotFoundError(source.value, ref.locator)
            if ref.key not in data:
                raise SecretKeyNotFoundError(ref.locator, ref.key)
            return data[ref.key]

        raise InvalidConfigError(f"Unsupported credential source: {source!r}", field="source")

    def _record(self, source: CredentialsSource, outcome: str, started: float) -> None:
        registry = self._registry
        if registry is None:
            return
        tags = {"source": source.value, "outcome": outcome}
        elapsed_ms = (self._clock() - started) * 1000.0

        def _emit() -> None:
            registry.counter(CREDENTIAL_RESOLUTIONS, tags=tags)
            registry.timer(CREDENTIAL_DURATION, elapsed_ms, tags={"source": source.value})

        safe_call(_emit, logger, "Failed to record metrics for %s credential", source.value)
