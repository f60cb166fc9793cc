"""Tests for secret store configuration models."""

from __future__ import annotations

import pytest

from connection_secrets.core.config.base import CredentialsSource, SecretStoreType, VaultAuthMethod, VaultKVVersion
from connection_secrets.core.config.store import (
    KubernetesSecretStoreConfig,
    PluginStoreConfig,
    SecretStoreConfig,
    VaultAuthConfig,
    VaultAuthKubernetesConfig,
    VaultSecretStoreConfig,
)
from connection_secrets.core.exceptions import InvalidConfigError
from tests.factories import (
    make_kubernetes_store,
    make_plugin_store,
    make_vault_kubernetes_auth,
    make_vault_store,
    make_vault_token_auth,
)


class TestSecretStoreConfigBackend:
    def test_unset_type_defaults_to_kubernetes(self) -> None:
        config = make_kubernetes_store(store_type=None)
        assert config.type is None
        assert config.store_type is SecretStoreType.KUBERNETES
        assert isinstance(config.backend, KubernetesSecretStoreConfig)

    def test_vault_backend(self) -> None:
        config = make_vault_store()
        assert isinstance(config.backend, VaultSecretStoreConfig)

    def test_plugin_backend(self) -> None:
        config = make_plugin_store()
        assert isinstance(config.backend, PluginStoreConfig)

    def test_missing_kubernetes_block_is_in_cluster(self) -> None:
        for store_type in (None, SecretStoreType.KUBERNETES):
            backend = SecretStoreConfig(type=store_type, default_scope="ns").backend
            assert isinstance(backend, KubernetesSecretStoreConfig)
            assert backend.auth.source is CredentialsSource.NONE

    @pytest.mark.parametrize("store_type", [SecretStoreType.VAULT, SecretStoreType.PLUGIN])
    def test_missing_block_raises(self, store_type: SecretStoreType) -> None:
        config = SecretStoreConfig(type=store_type, default_scope="ns")
        with pytest.raises(InvalidConfigError, match="selected but no matching configuration block present"):
            _ = config.backend

    def test_missing_block_error_names_type(self) -> None:
        config = SecretStoreConfig(type=SecretStoreType.VAULT, default_scope="ns")
        with pytest.raises(InvalidConfigError) as exc_info:
            _ = config.backend
        assert str(exc_info.value) == "Vault selected but no matching configuration block present"
        assert exc_info.value.field == "vault"

    def test_unselected_blocks_are_ignored(self) -> None:
        plugin = make_plugin_store().plugin
        config = make_kubernetes_store()
        config.plugin = plugin

        assert isinstance(config.backend, KubernetesSecretStoreConfig)
        assert config.ignored_blocks() == ["plugin"]

    def test_no_ignored_blocks(self) -> None:
        assert make_vault_store().ignored_blocks() == []


class TestForBackend:
    def test_kubernetes(self) -> None:
        block = make_kubernetes_store().kubernetes
        assert block is not None
        config = SecretStoreConfig.for_backend("ns", block)
        assert config.type is SecretStoreType.KUBERNETES
        assert config.backend is block

    def test_vault(self) -> None:
        block = make_vault_store().vault
        assert block is not None
        config = SecretStoreConfig.for_backend("ns", block)
        assert config.type is SecretStoreType.VAULT
        assert config.kubernetes is None and config.plugin is None

    def test_plugin(self) -> None:
        block = make_plugin_store().plugin
        assert block is not None
        config = SecretStoreConfig.for_backend("ns", block)
        assert config.type is SecretStoreType.PLUGIN
        assert config.backend is block


class TestVaultConfig:
    def test_version_defaults_to_v2(self) -> None:
        vault = make_vault_store().vault
        assert vault is not None
        assert vault.version is None
        assert vault.kv_version is VaultKVVersion.V2

    def test_explicit_version(self) -> None:
        vault = make_vault_store(version=VaultKVVersion.V1).vault
        assert vault is not None
        assert vault.kv_version is VaultKVVersion.V1

    def test_selected_token(self) -> None:
        auth = make_vault_token_auth()
        assert auth.selected is auth.token

    def test_selected_kubernetes(self) -> None:
        auth = make_vault_kubernetes_auth()
        assert isinstance(auth.selected, VaultAuthKubernetesConfig)

    def test_selected_missing_token(self) -> None:
        auth = VaultAuthConfig(method=VaultAuthMethod.TOKEN, kubernetes=VaultAuthKubernetesConfig(role="r"))
        with pytest.raises(InvalidConfigError, match="Token selected"):
            _ = auth.selected

    def test_selected_missing_kubernetes(self) -> None:
        auth = VaultAuthConfig(method=VaultAuthMethod.KUBERNETES)
        with pytest.raises(InvalidConfigError, match="Kubernetes selected"):
            _ = auth.selected
