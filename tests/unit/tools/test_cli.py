"""Tests for the css-check CLI entrypoint."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from connection_secrets.core.config.base import LogFormat
from connection_secrets.core.config.credentials import KubernetesAuthConfig
from connection_secrets.core.config.serialization import to_wire
from connection_secrets.core.config.settings import LoggingConfig
from connection_secrets.core.config.store import SecretStoreConfig
from connection_secrets.core.secrets.dispatch import KubernetesStoreHandle, PluginStoreHandle
from connection_secrets.tools.cli import (
    EXIT_INVALID,
    EXIT_OK,
    EXIT_RESOLUTION_FAILED,
    _build_parser,
    configure_logging,
    describe_handle,
    main,
)
from tests.factories import make_kubernetes_store, make_plugin_store, make_vault_kubernetes_auth, make_vault_store


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path: Path, config: SecretStoreConfig, name: str = "store.json") -> str:
    path = tmp_path / name
    path.write_text(json.dumps(to_wire(config)))
    return str(path)


class TestBuildParser:
    def test_requires_config_argument(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_defaults(self) -> None:
        args = _build_parser().parse_args(["store.json"])
        assert args.config == "store.json"
        assert args.settings is None
        assert args.strict is False
        assert args.resolve is False
        assert args.log_level is None

    def test_all_flags(self) -> None:
        args = _build_parser().parse_args(
            ["store.json", "--settings", "r.conf", "--strict", "--resolve", "--log-level", "DEBUG"]
        )
        assert args.settings == "r.conf"
        assert args.strict is True
        assert args.resolve is True
        assert args.log_level == "DEBUG"


class TestValidate:
    def test_valid_config_prints_scrubbed_wire(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = _write(tmp_path, make_vault_store())

        assert main([path]) == EXIT_OK

        out, err = capsys.readouterr()
        printed = json.loads(out)
        assert printed["vault"]["auth"]["token"]["env"] == "***REDACTED***"
        assert "deprecated" in err

    def test_missing_block(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "store.json"
        path.write_text('{"type": "Plugin", "defaultScope": "ns"}')

        assert main([str(path)]) == EXIT_INVALID
        assert "ERROR [plugin]: Plugin selected" in capsys.readouterr().err

    def test_unparseable(self, tmp_path: Path) -> None:
        path = tmp_path / "store.conf"
        path.write_text("{ defaultScope: [")
        assert main([str(path)]) == EXIT_INVALID

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "absent.json")]) == EXIT_INVALID

    def test_ignored_block_warns(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = make_kubernetes_store()
        config.plugin = make_plugin_store().plugin
        path = _write(tmp_path, config)

        assert main([path]) == EXIT_OK
        assert "WARNING: plugin block is ignored" in capsys.readouterr().err

    def test_ignored_block_strict(self, tmp_path: Path) -> None:
        config = make_kubernetes_store()
        config.plugin = make_plugin_store().plugin
        assert main([_write(tmp_path, config), "--strict"]) == EXIT_INVALID

    def test_bad_settings_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, make_kubernetes_store())
        assert main([path, "--settings", str(tmp_path / "absent.conf")]) == EXIT_INVALID


class TestResolve:
    def test_kubernetes_from_env(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("CSS_CLI_KUBECONFIG", "abcd")
        path = _write(tmp_path, make_kubernetes_store(auth=KubernetesAuthConfig.from_env("CSS_CLI_KUBECONFIG")))

        assert main([path, "--resolve"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "Kubernetes store (scope=crossplane-system, kubeconfig=4 bytes)" in out
        assert "abcd" not in out

    def test_vault_kubernetes_with_settings(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        token = tmp_path / "token"
        token.write_bytes(b"jwt")
        settings = tmp_path / "resolver.conf"
        settings.write_text(f'default_token_path: "{token}"\n')
        path = _write(tmp_path, make_vault_store(auth=make_vault_kubernetes_auth("crossplane")))

        assert main([path, "--resolve", "--settings", str(settings)]) == EXIT_OK
        assert "auth=Kubernetes role=crossplane" in capsys.readouterr().out

    def test_resolution_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VAULT_TOKEN", raising=False)
        path = _write(tmp_path, make_vault_store())
        assert main([path, "--resolve"]) == EXIT_RESOLUTION_FAILED


class TestDescribeHandle:
    def test_in_cluster(self) -> None:
        handle = KubernetesStoreHandle(default_scope="ns", kubeconfig=b"")
        assert describe_handle(handle) == "Kubernetes store (scope=ns, kubeconfig=in-cluster)"

    def test_plugin(self) -> None:
        plugin = make_plugin_store().plugin
        assert plugin is not None
        summary = describe_handle(PluginStoreHandle(default_scope="ns", config=plugin))
        assert summary == (
            "Plugin store (scope=ns, endpoint=ess-plugin-vault.crossplane-system:4040, "
            "configRef=secrets.crossplane.io/v1alpha1/VaultConfig/vault)"
        )


class TestConfigureLogging:
    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(LoggingConfig(format=LogFormat.JSON, output="stdout"))
        logging.getLogger("css.test").info("hello")
        line = json.loads(capsys.readouterr().out.strip())
        assert line["message"] == "hello"
        assert line["logger"] == "css.test"

    def test_level_override(self) -> None:
        configure_logging(LoggingConfig(), "DEBUG")
        assert logging.getLogger().level == logging.DEBUG
