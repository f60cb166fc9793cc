"""Tests for building hvac clients from resolved Vault handles."""

from __future__ import annotations

import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from connection_secrets.core.config.base import VaultKVVersion
from connection_secrets.core.secrets.clients import vault_client_for
from connection_secrets.core.secrets.dispatch import VaultKubernetesAuth, VaultStoreHandle, VaultTokenAuth


def _handle(**overrides: object) -> VaultStoreHandle:
    kwargs: dict[str, object] = {
        "default_scope": "crossplane-system",
        "server": "https://vault.acme.org",
        "mount_path": "secret",
        "version": VaultKVVersion.V2,
        "auth": VaultTokenAuth(token=b"s.token\n"),
    }
    kwargs.update(overrides)
    return VaultStoreHandle(**kwargs)  # type: ignore[arg-type]


@pytest.fixture()
def ca_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    return tmp_path


class TestVaultClientFor:
    def test_token_auth(self) -> None:
        mock_hvac = MagicMock()
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            client = vault_client_for(_handle())

        mock_hvac.Client.assert_called_once_with(token="s.token", url="https://vault.acme.org", verify=True)
        assert client is mock_hvac.Client.return_value

    def test_namespace_passed(self) -> None:
        mock_hvac = MagicMock()
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            vault_client_for(_handle(namespace="team-a"))

        assert mock_hvac.Client.call_args.kwargs["namespace"] == "team-a"

    def test_kubernetes_auth_logs_in(self) -> None:
        mock_hvac = MagicMock()
        auth = VaultKubernetesAuth(role="crossplane", mount_path="", service_account_token=b"jwt\n")
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            client = vault_client_for(_handle(auth=auth))

        mock_hvac.Client.assert_called_once_with(url="https://vault.acme.org", verify=True)
        client.auth.kubernetes.login.assert_called_once_with(role="crossplane", jwt="jwt", mount_point="kubernetes")

    def test_kubernetes_auth_custom_mount(self) -> None:
        mock_hvac = MagicMock()
        auth = VaultKubernetesAuth(role="r", mount_path="k8s-east", service_account_token=b"jwt")
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            client = vault_client_for(_handle(auth=auth))

        assert client.auth.kubernetes.login.call_args.kwargs["mount_point"] == "k8s-east"

    def test_ca_bundle_written_for_verify(self, ca_dir: Path) -> None:
        mock_hvac = MagicMock()
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            vault_client_for(_handle(ca_bundle=b"PEM DATA"))

        verify = mock_hvac.Client.call_args.kwargs["verify"]
        assert isinstance(verify, str)
        assert Path(verify).parent == ca_dir
        assert Path(verify).read_bytes() == b"PEM DATA"

    def test_ca_bundle_file_reused(self, ca_dir: Path) -> None:
        mock_hvac = MagicMock()
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            for _ in range(5):
                vault_client_for(_handle(ca_bundle=b"PEM DATA"))
            vault_client_for(_handle(ca_bundle=b"OTHER PEM"))

        paths = {call.kwargs["verify"] for call in mock_hvac.Client.call_args_list}
        assert len(paths) == 2
        assert sorted(p.name for p in ca_dir.iterdir()) == sorted(Path(p).name for p in paths)

    def test_stale_ca_bundle_file_rewritten(self, ca_dir: Path) -> None:
        mock_hvac = MagicMock()
        with patch.dict("sys.modules", {"hvac": mock_hvac}):
            vault_client_for(_handle(ca_bundle=b"PEM DATA"))
            path = Path(mock_hvac.Client.call_args.kwargs["verify"])
            path.write_bytes(b"truncated")
            vault_client_for(_handle(ca_bundle=b"PEM DATA"))

        assert path.read_bytes() == b"PEM DATA"
        assert list(ca_dir.iterdir()) == [path]
