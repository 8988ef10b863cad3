"""
Pydantic validators for environment configuration.

Provides validated models for all configuration options.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import MAX_SEND_ATTEMPTS


class RetrySettings(BaseModel):
    """Retry configuration for rate-limited requests."""

    max_attempts: int = Field(default=MAX_SEND_ATTEMPTS, ge=1, le=20, description="Attempt ceiling per call")
    backoff_base: float = Field(default=1.0, ge=0, description="First wait in seconds")
    backoff_factor: float = Field(default=2.0, ge=1.0, description="Exponential backoff factor")
    backoff_max: float = Field(default=60.0, ge=0, description="Maximum wait between attempts")
    respect_retry_after: bool = Field(default=True, description="Honor provider Retry-After hint")
    retry_after_max: float = Field(default=300.0, ge=0)


class LoggingSettings(BaseModel):
    """Logging configuration from environment."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=True)
    enable_file: bool = Field(default=False)
    file_path: Optional[str] = Field(default=None, validate_default=True)
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: Optional[str], info) -> Optional[str]:
        """Validate file_path is required when enable_file=True."""
        if info.data.get('enable_file') and not v:
            raise ValueError("file_path is required when enable_file=True")
        return v


class NovaClientSettings(BaseSettings):
    """
    Nova Client configuration from environment variables.

    Reads from:
    1. Environment variables (NOVA_CLIENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        NOVA_CLIENT_BASE_URL=https://compute.example.com/v2/tenant
        NOVA_CLIENT_AUTH_TOKEN=gAAAAABk...
        NOVA_CLIENT_TIMEOUT_READ=30
        NOVA_CLIENT_RETRY_MAX_ATTEMPTS=3
        NOVA_CLIENT_LOG_LEVEL=INFO

    Usage:
        >>> settings = NovaClientSettings()
        >>> settings.base_url
        'https://compute.example.com/v2/tenant'
    """

    model_config = SettingsConfigDict(
        env_prefix='NOVA_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Compute endpoint URL")

    # Opaque token, forwarded as X-Auth-Token
    auth_token: Optional[SecretStr] = Field(default=None)

    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    retry_max_attempts: int = Field(default=MAX_SEND_ATTEMPTS, ge=1, le=20)
    retry_backoff_base: float = Field(default=1.0, ge=0)
    retry_backoff_factor: float = Field(default=2.0, ge=1.0)
    retry_backoff_max: float = Field(default=60.0, ge=0)
    retry_respect_retry_after: bool = Field(default=True)
    retry_after_max: float = Field(default=300.0, ge=0)

    verify_ssl: bool = Field(default=True)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=False)
    log_enable_file: bool = Field(default=False)
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = Field(default=True)

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Only http(s) endpoints."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {v!r}")
        return v.rstrip('/')

    def to_retry_settings(self) -> RetrySettings:
        """Convert to RetrySettings."""
        return RetrySettings(
            max_attempts=self.retry_max_attempts,
            backoff_base=self.retry_backoff_base,
            backoff_factor=self.retry_backoff_factor,
            backoff_max=self.retry_backoff_max,
            respect_retry_after=self.retry_respect_retry_after,
            retry_after_max=self.retry_after_max,
        )

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """Convert to LoggingSettings if logging enabled."""
        if not self.log_enable_file and not self.log_enable_console:
            return None

        return LoggingSettings(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_enable_file,
            file_path=self.log_file_path,
            max_bytes=self.log_max_bytes,
            backup_count=self.log_backup_count,
            enable_correlation_id=self.log_enable_correlation_id,
        )
