"""Hand-off of resolved store handles to backend client libraries.

Requires ``hvac`` for Vault stores.  The import happens on first use so
deployments that only use Kubernetes or plugin stores do not need it.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from connection_secrets.core.secrets.dispatch import VaultKubernetesAuth, VaultStoreHandle

logger = logging.getLogger(__name__)

DEFAULT_KUBERNETES_AUTH_MOUNT = "kubernetes"


def _write_ca_bundle(ca_bundle: bytes) -> str:
    """Return the path of a file holding *ca_bundle*.

    hvac only accepts a CA bundle path.  The file is named after the
    bundle digest, so every client built for the same bundle shares it.
    """
    digest = hashlib.sha256(ca_bundle).hexdigest()[:16]
    path = Path(tempfile.gettempdir()) / f"vault-ca-{digest}.pem"
    if path.is_file() and path.read_bytes() == ca_bundle:
        return str(path)

    with tempfile.NamedTemporaryFile(dir=path.parent, prefix="vault-ca-", suffix=".tmp", delete=False) as fh:
        fh.write(ca_bundle)
    os.replace(fh.name, path)
    logger.debug("Wrote Vault CA bundle to %s", path)
    return str(path)


def vault_client_for(handle: VaultStoreHandle) -> Any:
    """Build an authenticated ``hvac.Client`` for a resolved Vault store.

    Token auth sets the token directly; Kubernetes auth logs in with the
    service account token, which performs a network call to Vault.

    Args:
        handle: Result of dispatching a Vault store configuration.

    Returns:
        An ``hvac.Client`` ready for KV operations under
        ``handle.mount_path``.
    """
    import hvac  # type: ignore[import-untyped]

    verify: bool | str = True
    if handle.ca_bundle:
        verify = _write_ca_bundle(handle.ca_bundle)

    kwargs: dict[str, Any] = {"url": handle.server, "verify": verify}
    if handle.namespace:
        kwargs["namespace"] = handle.namespace

    auth = handle.auth
    if isinstance(auth, VaultKubernetesAuth):
        client = hvac.Client(**kwargs)
        mount_point = auth.mount_path or DEFAULT_KUBERNETES_AUTH_MOUNT
        logger.debug("Logging in to %s with Kubernetes auth at %s as role %s", handle.server, mount_point, auth.role)
        client.auth.kubernetes.login(
            role=auth.role,
            jwt=auth.service_account_token.decode().strip(),
            mount_point=mount_point,
        )
        return client

    return hvac.Client(token=auth.token.decode().strip(), **kwargs)
