"""Nova Client - resilient request layer for a compute-provisioning API."""

import logging
from importlib.metadata import PackageNotFoundError, version

from .async_client import AsyncHTTPClient
from .compute import ComputeClient, Flavor, FloatingIP, SecurityGroup
from .core.config import MAX_SEND_ATTEMPTS, ClientConfig, RetryConfig, TimeoutConfig
from .core.exceptions import (
    ClassifiedError,
    ConfigurationError,
    ErrorKind,
    FaultError,
    MaxAttemptsExceededError,
    NotFoundError,
    QuotaExceededError,
    RateLimitedError,
    ResourceExhaustedError,
    is_fault,
    is_not_found,
    is_quota_exceeded,
    is_rate_limited,
    is_resource_exhausted,
)
from .core.http_client import HTTPClient
from .core.logging import LoggingConfig, NovaClientLogger
from .core.retry_engine import RetryEngine

# NullHandler: библиотека не пишет логи, пока их не настроит приложение
logging.getLogger('nova_client').addHandler(logging.NullHandler())

try:
    __version__ = version("nova-client-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Transports
    "HTTPClient",
    "AsyncHTTPClient",
    "RetryEngine",
    # API client
    "ComputeClient",
    "SecurityGroup",
    "FloatingIP",
    "Flavor",
    # Config
    "ClientConfig",
    "RetryConfig",
    "TimeoutConfig",
    "LoggingConfig",
    "NovaClientLogger",
    "MAX_SEND_ATTEMPTS",
    # Errors
    "ErrorKind",
    "ClassifiedError",
    "RateLimitedError",
    "ResourceExhaustedError",
    "QuotaExceededError",
    "NotFoundError",
    "FaultError",
    "MaxAttemptsExceededError",
    "ConfigurationError",
    "is_fault",
    "is_not_found",
    "is_quota_exceeded",
    "is_rate_limited",
    "is_resource_exhausted",
]
