"""
Configuration loader from environment variables and .env files.

Main entry point for loading configuration.
"""

from typing import Optional

from ..config import ClientConfig, RetryConfig, TimeoutConfig
from ..logging.config import LoggingConfig
from ...utils.sanitizer import mask_sensitive_data
from .profiles import ProfileType, get_env_file_path
from .validator import NovaClientSettings


def load_from_env(
    profile: Optional[ProfileType] = None,
    env_file: Optional[str] = None,
    **overrides
) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (NOVA_CLIENT_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Args:
        profile: Profile to load (development/staging/production)
        env_file: Custom .env file path (overrides profile)
        **overrides: Explicit config overrides (settings field names)

    Returns:
        ClientConfig instance

    Raises:
        pydantic.ValidationError: Invalid value in env/.env/overrides

    Example:
        >>> config = load_from_env(profile="production")
        >>> config = load_from_env(base_url="http://localhost:8774/v2/tenant", retry_max_attempts=5)
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    # Overrides go through the same validation as env values
    settings = NovaClientSettings(_env_file=env_file, **overrides)

    timeout = TimeoutConfig(
        connect=settings.timeout_connect,
        read=settings.timeout_read,
    )

    retry_settings = settings.to_retry_settings()
    retry = RetryConfig(
        max_attempts=retry_settings.max_attempts,
        backoff_base=retry_settings.backoff_base,
        backoff_factor=retry_settings.backoff_factor,
        backoff_max=retry_settings.backoff_max,
        respect_retry_after=retry_settings.respect_retry_after,
        retry_after_max=retry_settings.retry_after_max,
    )

    logging_config = None
    logging_settings = settings.to_logging_settings()
    if logging_settings:
        logging_config = LoggingConfig.create(
            level=logging_settings.level,
            format=logging_settings.format,
            enable_console=logging_settings.enable_console,
            enable_file=logging_settings.enable_file,
            file_path=logging_settings.file_path,
            max_bytes=logging_settings.max_bytes,
            backup_count=logging_settings.backup_count,
            enable_correlation_id=logging_settings.enable_correlation_id,
        )

    token = settings.auth_token.get_secret_value() if settings.auth_token else None

    config = ClientConfig.create(
        base_url=settings.base_url or None,
        auth_token=token,
        timeout=timeout,
        verify_ssl=settings.verify_ssl,
        logging=logging_config,
    )
    return config.with_retry(retry)


def print_config_summary(config: ClientConfig, mask_secrets: bool = True):
    """
    Print configuration summary.

    Example:
        >>> print_config_summary(load_from_env())
        ClientConfig:
          base_url: https://compute.example.com/v2/tenant
          headers: {'X-Auth-Token': '***'}
          ...
    """
    headers = dict(config.headers)
    if mask_secrets:
        headers = mask_sensitive_data(headers)

    print("ClientConfig:")
    print(f"  base_url: {config.base_url}")
    print(f"  headers: {headers}")
    print(f"  timeout: connect={config.timeout.connect}s, read={config.timeout.read}s")
    print(
        f"  retry: max_attempts={config.retry.max_attempts}, "
        f"backoff={config.retry.backoff_base}*{config.retry.backoff_factor}^n "
        f"(max {config.retry.backoff_max}s), respect_retry_after={config.retry.respect_retry_after}"
    )
    print(f"  verify_ssl: {config.verify_ssl}")

    if config.logging:
        print(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            print(f"    file: {config.logging.file_path}")
