"""Secret-reading collaborators.

Resolving a ``Secret`` credential source needs something that can look
up a secret's data by namespace and name.  That lookup is injected as a
:class:`SecretReader`; this module ships two implementations that do not
need an API client.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from connection_secrets.core.exceptions import CredentialReadError, InvalidConfigError

logger = logging.getLogger(__name__)


@runtime_checkable
class SecretReader(Protocol):
    """Looks up the data of a secret-like object."""

    def read(self, namespace: str, name: str) -> Mapping[str, bytes] | None:
        """Return the secret's data, or ``None`` if it does not exist.

        Raises:
            CredentialReadError: If the lookup itself failed.
        """
        ...


class InMemorySecretReader:
    """Dict-backed secret reader for tests and local runs.

    Args:
        secrets: Mapping of ``(namespace, name)`` to secret data.
            String values are UTF-8 encoded.
    """

    def __init__(self, secrets: Mapping[tuple[str, str], Mapping[str, bytes | str]] | None = None) -> None:
        self._secrets: dict[tuple[str, str], dict[str, bytes]] = {}
        for (namespace, name), data in (secrets or {}).items():
            self.put(namespace, name, data)

    def put(self, namespace: str, name: str, data: Mapping[str, bytes | str]) -> None:
        """Create or replace a secret."""
        self._secrets[(namespace, name)] = {
            k: v.encode() if isinstance(v, str) else bytes(v) for k, v in data.items()
        }

    def read(self, namespace: str, name: str) -> Mapping[str, bytes] | None:
        data = self._secrets.get((namespace, name))
        return dict(data) if data is not None else None


class MountedSecretReader:
    """Reads secrets projected as files under ``<root>/<namespace>/<name>/<key>``.

    This is the layout produced by mounting each secret as a volume.
    An empty namespace falls back to *default_namespace*.

    Args:
        root: Directory containing one sub-directory per namespace.
        default_namespace: Namespace used when a selector omits one.
    """

    def __init__(self, root: str | Path, default_namespace: str = "default") -> None:
        self._root = Path(root)
        self._default_namespace = default_namespace

    def read(self, namespace: str, name: str) -> Mapping[str, bytes] | None:
        """Return the files of the secret directory, or ``None`` if it is absent.

        Raises:
            InvalidConfigError: If *namespace* or *name* is not a single path segment.
            CredentialReadError: If a key file cannot be read.
        """
        namespace = namespace or self._default_namespace
        for part in (namespace, name):
            if not part or part in (".", "..") or "/" in part or "\\" in part:
                raise InvalidConfigError(f"Invalid secret locator '{namespace}/{name}'", field="secretRef")
        secret_dir = self._root / namespace / name
        if not secret_dir.is_dir():
            logger.debug("No mounted secret at %s", secret_dir)
            return None
        try:
            # Projected volumes also contain ..data symlinks; only regular keys count.
            return {
                entry.name: entry.read_bytes()
                for entry in secret_dir.iterdir()
                if entry.is_file() and not entry.name.startswith("..")
            }
        except OSError as exc:
            raise CredentialReadError("Secret", f"{namespace}/{name}", exc) from exc
