"""Tests for configuration file loader."""

import json

import pytest

from nova_client.core.config import ClientConfig
from nova_client.core.env_config.file_loader import (
    CONFIG_FILE_ENV_VAR,
    ConfigFileLoader,
    ConfigValidationError,
)
from nova_client.core.exceptions import ConfigurationError


class TestFromYAML:

    def test_load_valid_yaml(self, tmp_path):
        config_file = tmp_path / "nova.yaml"
        config_file.write_text(
            """
nova_client:
  base_url: "https://compute.example.com/v2/tenant"
  auth_token: "gAAAAB-token"
  timeout:
    connect: 10
    read: 60
  retry:
    max_attempts: 5
    backoff_base: 0.5
    respect_retry_after: false
  headers:
    User-Agent: "nova-client-tests/1.0"
"""
        )

        config = ConfigFileLoader.from_yaml(config_file)

        assert isinstance(config, ClientConfig)
        assert config.base_url == "https://compute.example.com/v2/tenant"
        assert config.auth_token == "gAAAAB-token"
        assert config.timeout.connect == 10
        assert config.timeout.read == 60
        assert config.retry.max_attempts == 5
        assert config.retry.backoff_base == 0.5
        assert config.retry.respect_retry_after is False
        assert config.headers["User-Agent"] == "nova-client-tests/1.0"

    def test_section_is_optional(self, tmp_path):
        config_file = tmp_path / "flat.yml"
        config_file.write_text("base_url: https://compute.example.com\nverify_ssl: false\n")

        config = ConfigFileLoader.from_yaml(config_file)

        assert config.base_url == "https://compute.example.com"
        assert config.verify_ssl is False

    def test_logging_section(self, tmp_path):
        config_file = tmp_path / "nova.yaml"
        config_file.write_text(
            "nova_client:\n"
            "  logging:\n"
            "    level: DEBUG\n"
            "    format: json\n"
            "    enable_console: false\n"
        )

        config = ConfigFileLoader.from_yaml(config_file)

        assert config.logging.level.value == "DEBUG"
        assert config.logging.enable_console is False

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("nova_client: [unclosed\n")

        with pytest.raises(ConfigValidationError, match="Invalid YAML"):
            ConfigFileLoader.from_yaml(config_file)

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        with pytest.raises(ConfigValidationError, match="Empty config"):
            ConfigFileLoader.from_yaml(config_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigFileLoader.from_yaml(tmp_path / "missing.yaml")


class TestFromJSON:

    def test_load_valid_json(self, tmp_path):
        config_file = tmp_path / "nova.json"
        config_file.write_text(json.dumps({
            "nova_client": {
                "base_url": "https://compute.example.com",
                "retry": {"max_attempts": 2},
            }
        }))

        config = ConfigFileLoader.from_json(config_file)

        assert config.retry.max_attempts == 2

    def test_invalid_json(self, tmp_path):
        config_file = tmp_path / "bad.json"
        config_file.write_text("{not json")

        with pytest.raises(ConfigValidationError, match="Invalid JSON"):
            ConfigFileLoader.from_json(config_file)


class TestValidation:

    @pytest.mark.parametrize("payload,match", [
        ({"retry": {"max_attempts": 0}}, "max_attempts"),
        ({"retry": {"jitter": True}}, "Unknown retry options"),
        ({"retry": 3}, "retry must be a dictionary"),
        ({"timeout": {"connect": -1}}, "connect timeout"),
        ({"headers": ["X-Test"]}, "headers must be a dictionary"),
        ({"nova_client": "oops"}, "must be a dictionary"),
    ])
    def test_invalid_config(self, tmp_path, payload, match):
        config_file = tmp_path / "nova.json"
        config_file.write_text(json.dumps(payload))

        with pytest.raises(ConfigValidationError, match=match):
            ConfigFileLoader.from_json(config_file)

    def test_validation_error_is_configuration_error(self):
        assert issubclass(ConfigValidationError, ConfigurationError)


class TestFromFile:

    def test_auto_detect(self, tmp_path):
        yaml_file = tmp_path / "nova.yml"
        yaml_file.write_text("base_url: https://a.example.com\n")
        json_file = tmp_path / "nova.json"
        json_file.write_text('{"base_url": "https://b.example.com"}')

        assert ConfigFileLoader.from_file(yaml_file).base_url == "https://a.example.com"
        assert ConfigFileLoader.from_file(json_file).base_url == "https://b.example.com"

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported config file format"):
            ConfigFileLoader.from_file(tmp_path / "nova.toml")

    def test_from_env_path(self, tmp_path, monkeypatch):
        config_file = tmp_path / "nova.yaml"
        config_file.write_text("base_url: https://env.example.com\n")
        monkeypatch.setenv(CONFIG_FILE_ENV_VAR, str(config_file))

        assert ConfigFileLoader.from_env_path().base_url == "https://env.example.com"

    def test_from_env_path_unset(self, monkeypatch):
        monkeypatch.delenv(CONFIG_FILE_ENV_VAR, raising=False)
        assert ConfigFileLoader.from_env_path() is None
