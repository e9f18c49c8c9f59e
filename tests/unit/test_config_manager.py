"""Unit tests for config_manager module."""

import os
import stat

import pytest

from azvm.config_manager import AzvmConfig, ConfigError, ConfigManager


class TestAzvmConfig:
    def test_builtin_defaults(self):
        config = AzvmConfig()

        assert config.default_location == "northeurope"
        assert config.default_size == "Standard_D2s_v3"
        assert config.default_image == "windows-11"
        assert config.default_username == "azureuser"

    def test_from_dict_partial(self):
        config = AzvmConfig.from_dict({"default_location": "uksouth"})

        assert config.default_location == "uksouth"
        assert config.default_size == "Standard_D2s_v3"

    def test_from_dict_ignores_unknown_keys(self):
        config = AzvmConfig.from_dict({"default_password": "nope", "default_size": "Standard_B2s"})

        assert config.default_size == "Standard_B2s"
        assert not hasattr(config, "default_password")

    @pytest.mark.parametrize("value", [123, "", "   ", None])
    def test_from_dict_rejects_bad_values(self, value):
        with pytest.raises(ConfigError, match="default_location"):
            AzvmConfig.from_dict({"default_location": value})

    def test_to_dict_round_trip(self):
        config = AzvmConfig(default_location="eastus")

        assert AzvmConfig.from_dict(config.to_dict()) == config


class TestConfigManager:
    def test_missing_default_file_gives_defaults(self, isolated_config):
        assert not isolated_config.exists()

        assert ConfigManager.load_config() == AzvmConfig()

    def test_loads_default_file(self, isolated_config):
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text('default_location = "westeurope"\ndefault_image = "ubuntu"\n')
        os.chmod(isolated_config, 0o600)

        config = ConfigManager.load_config()

        assert config.default_location == "westeurope"
        assert config.default_image == "ubuntu"

    def test_env_var_overrides_default_path(self, tmp_path, monkeypatch):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('default_username = "opsadmin"\n')
        os.chmod(config_file, 0o600)
        monkeypatch.setenv("AZVM_CONFIG", str(config_file))

        assert ConfigManager.get_config_path() == config_file.resolve()
        assert ConfigManager.load_config().default_username == "opsadmin"

    def test_custom_path_beats_env_var(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env.toml"
        env_file.write_text("")
        custom_file = tmp_path / "custom.toml"
        custom_file.write_text("")
        monkeypatch.setenv("AZVM_CONFIG", str(env_file))

        assert ConfigManager.get_config_path(str(custom_file)) == custom_file.resolve()

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigManager.get_config_path(str(tmp_path / "missing.toml"))

    def test_invalid_toml_raises(self, tmp_path):
        config_file = tmp_path / "bad.toml"
        config_file.write_text("default_location = \n")
        os.chmod(config_file, 0o600)

        with pytest.raises(ConfigError, match="Failed to load config"):
            ConfigManager.load_config(str(config_file))

    def test_insecure_permissions_fixed(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('default_size = "Standard_B2s"\n')
        os.chmod(config_file, 0o644)

        config = ConfigManager.load_config(str(config_file))

        assert config.default_size == "Standard_B2s"
        assert stat.S_IMODE(config_file.stat().st_mode) == 0o600
