"""
Configuration file loader for YAML and JSON files.

Supports loading ClientConfig from external configuration files.

Example config.yaml:
    nova_client:
      base_url: https://compute.example.com/v2/tenant
      auth_token: gAAAAABk...
      timeout:
        connect: 5
        read: 30
      retry:
        max_attempts: 3
        backoff_base: 0.5
      logging:
        level: INFO
        format: json
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..config import ClientConfig, RetryConfig, TimeoutConfig
from ..exceptions import ConfigurationError
from ..logging import LoggingConfig

CONFIG_FILE_ENV_VAR = "NOVA_CLIENT_CONFIG_FILE"

_RETRY_KEYS = (
    "max_attempts",
    "backoff_base",
    "backoff_factor",
    "backoff_max",
    "respect_retry_after",
    "retry_after_max",
)


class ConfigValidationError(ConfigurationError):
    """Raised when configuration file is invalid."""


class ConfigFileLoader:
    """
    Загрузчик конфигурации из файлов.

    Examples:
        >>> config = ConfigFileLoader.from_yaml("nova.yaml")
        >>> config = ConfigFileLoader.from_json("nova.json")
        >>> config = ConfigFileLoader.from_file("nova.yaml")  # по расширению
        >>> config = ConfigFileLoader.from_env_path()  # из NOVA_CLIENT_CONFIG_FILE
    """

    @staticmethod
    def from_yaml(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из YAML файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}") from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_json(path: Union[str, Path]) -> ClientConfig:
        """
        Загрузить конфиг из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}") from e

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return ConfigFileLoader._build_config(data, str(path))

    @staticmethod
    def from_file(path: Union[str, Path]) -> ClientConfig:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            return ConfigFileLoader.from_yaml(path)
        if suffix == ".json":
            return ConfigFileLoader.from_json(path)
        raise ValueError(
            f"Unsupported config file format: {suffix}. "
            f"Supported formats: .yaml, .yml, .json"
        )

    @staticmethod
    def from_env_path() -> Optional[ClientConfig]:
        """
        Загрузить из пути в NOVA_CLIENT_CONFIG_FILE.

        Returns:
            ClientConfig или None, если переменная не задана
        """
        config_path = os.environ.get(CONFIG_FILE_ENV_VAR)
        if not config_path:
            return None

        return ConfigFileLoader.from_file(config_path)

    @staticmethod
    def _section(config_data: Dict[str, Any], name: str, source: str) -> Optional[Dict[str, Any]]:
        section = config_data.get(name)
        if section is None:
            return None
        if not isinstance(section, dict):
            raise ConfigValidationError(f"{name} must be a dictionary in {source}")
        return section

    @staticmethod
    def _build_config(data: Dict[str, Any], source: str) -> ClientConfig:
        """
        Build ClientConfig from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        if not isinstance(data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(data).__name__} in {source}"
            )

        config_data = data.get("nova_client", data)
        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        try:
            timeout_cfg = TimeoutConfig()
            timeout_data = ConfigFileLoader._section(config_data, "timeout", source)
            if timeout_data is not None:
                timeout_cfg = TimeoutConfig(
                    connect=timeout_data.get("connect", 5),
                    read=timeout_data.get("read", 30),
                )

            retry_cfg = RetryConfig()
            retry_data = ConfigFileLoader._section(config_data, "retry", source)
            if retry_data is not None:
                unknown = set(retry_data) - set(_RETRY_KEYS)
                if unknown:
                    raise ConfigValidationError(
                        f"Unknown retry options {sorted(unknown)} in {source}"
                    )
                retry_cfg = RetryConfig(**retry_data)

            logging_cfg = None
            logging_data = ConfigFileLoader._section(config_data, "logging", source)
            if logging_data is not None:
                logging_cfg = LoggingConfig.create(
                    level=logging_data.get("level", "INFO"),
                    format=logging_data.get("format", "text"),
                    enable_console=logging_data.get("enable_console", True),
                    enable_file=logging_data.get("enable_file", False),
                    file_path=logging_data.get("file_path"),
                    enable_correlation_id=logging_data.get("enable_correlation_id", True),
                )

            headers = config_data.get("headers", {})
            if not isinstance(headers, dict):
                raise ConfigValidationError(f"headers must be a dictionary in {source}")

            config = ClientConfig.create(
                base_url=config_data.get("base_url"),
                auth_token=config_data.get("auth_token"),
                timeout=timeout_cfg,
                verify_ssl=config_data.get("verify_ssl", True),
                headers=headers,
                logging=logging_cfg,
            )
            return config.with_retry(retry_cfg)

        except (ValueError, TypeError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e
