"""
Environment configuration system for Nova Client.

Load configuration from .env files, environment variables and YAML/JSON files.

Example:
    >>> from nova_client.core.env_config import load_from_env
    >>>
    >>> config = load_from_env()
    >>> config = load_from_env(profile="production")
    >>> config = load_from_env(profile="production", base_url="https://compute.example.com/v2/tenant")
"""

from .file_loader import CONFIG_FILE_ENV_VAR, ConfigFileLoader, ConfigValidationError
from .loader import load_from_env, print_config_summary
from .profiles import PROFILE_ENV_VAR, ProfileConfig, ProfileType, detect_profile, get_env_file_path
from .validator import LoggingSettings, NovaClientSettings, RetrySettings

__all__ = [
    # Main loader
    "load_from_env",
    "print_config_summary",
    # File loader
    "ConfigFileLoader",
    "ConfigValidationError",
    "CONFIG_FILE_ENV_VAR",
    # Validators
    "NovaClientSettings",
    "RetrySettings",
    "LoggingSettings",
    # Profiles
    "ProfileType",
    "ProfileConfig",
    "PROFILE_ENV_VAR",
    "detect_profile",
    "get_env_file_path",
]
