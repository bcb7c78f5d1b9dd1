"""Test suite for config management functionality.

This test suite validates:
- Config loader functionality (optional file, defaults, validation)
- Config path resolution (--config option, default location)
- Configuration is only read, never written
"""
import os

import pytest
import yaml

from azure_blob_sas.sas.domains import config_loader
from azure_blob_sas.sas.domains.config_loader import ConfigError
from azure_blob_sas.sas.domains.policy import DEFAULT_VALIDITY_CHOICES, Duration


@pytest.fixture
def temp_config_file(temp_config_dir):
    """Fixture to create a config file at the default location."""
    config_file = temp_config_dir / "config.yml"
    with open(config_file, 'w') as f:
        yaml.dump({"validity": {"choices": ["15m", "1d"]}, "logging": {"level": "info"}}, f)
    return config_file


def snapshot(root):
    """Every file under root with its modification time."""
    return {
        os.path.join(dirpath, name): os.stat(os.path.join(dirpath, name)).st_mtime_ns
        for dirpath, _, names in os.walk(root)
        for name in names
    }


class TestConfigPath:
    """Test suite for config path resolution."""

    def test_no_config_file(self, temp_home):
        assert config_loader._get_config_path() is None

    def test_default_location(self, temp_home, temp_config_file):
        assert config_loader._get_config_path() == str(temp_config_file)

    def test_explicit_path_takes_priority(self, temp_home, temp_config_file, tmp_path):
        custom = tmp_path / "custom.yml"
        custom.write_text(yaml.dump({"validity": {"choices": ["2h"]}}))

        assert config_loader._get_config_path(str(custom)) == str(custom)

    def test_explicit_path_must_exist(self, temp_home, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            config_loader._get_config_path(str(tmp_path / "missing.yml"))

        assert "Config file not found" in str(exc_info.value)

    def test_directory_at_default_location_is_ignored(self, temp_config_dir):
        (temp_config_dir / "config.yml").mkdir()
        assert config_loader._get_config_path() is None


class TestConfigLoader:
    """Test suite for config_loader module."""

    def test_no_config_file_uses_defaults(self, temp_home):
        config = config_loader.load_config()

        assert config["validity"]["choices"] == DEFAULT_VALIDITY_CHOICES
        assert config["logging"]["level"] is None

    def test_default_location_is_loaded(self, temp_home, temp_config_file):
        config = config_loader.load_config()

        assert config["validity"]["choices"] == [Duration(15, "minutes"), Duration(1, "days")]
        assert config["logging"]["level"] == "INFO"

    def test_explicit_config_is_loaded(self, temp_home, temp_config_file, tmp_path):
        custom = tmp_path / "custom.yml"
        custom.write_text(yaml.dump({"validity": {"choices": ["1y"]}}))

        config = config_loader.load_config(str(custom))

        assert config["validity"]["choices"] == [Duration(1, "years")]
        assert config["logging"]["level"] is None

    def test_loading_writes_nothing(self, temp_home, temp_config_file):
        before = snapshot(temp_home)

        config_loader.load_config()
        config_loader.load_config(str(temp_config_file))

        assert snapshot(temp_home) == before

    def test_empty_config_file_uses_defaults(self, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("")
        assert config_loader.load_config()["validity"]["choices"] == DEFAULT_VALIDITY_CHOICES

    def test_invalid_yaml_config(self, temp_config_dir):
        (temp_config_dir / "config.yml").write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_config()

        assert "parse" in str(exc_info.value).lower()

    @pytest.mark.parametrize("content,message", [
        (["a", "list"], "mapping"),
        ({"validity": {"choices": []}}, "non-empty list"),
        ({"validity": {"choices": ["soon"]}}, "Invalid duration"),
        ({"validity": "1h"}, "'validity' section"),
        ({"logging": {"level": "loud"}}, "Unsupported logging level"),
    ])
    def test_invalid_values(self, temp_config_dir, content, message):
        (temp_config_dir / "config.yml").write_text(yaml.dump(content))

        with pytest.raises(ConfigError) as exc_info:
            config_loader.load_config()

        assert message in str(exc_info.value)
