"""Core Nova Client модули."""

from .config import (
    AUTH_TOKEN_HEADER,
    MAX_SEND_ATTEMPTS,
    ClientConfig,
    RetryConfig,
    TimeoutConfig,
)
from .context import RequestContext, RetryState
from .error_handler import ErrorHandler, parse_fault_body, parse_retry_after
from .exceptions import (
    ClassifiedError,
    ConfigurationError,
    ErrorKind,
    FaultError,
    MaxAttemptsExceededError,
    NotFoundError,
    QuotaExceededError,
    RateLimitedError,
    ResourceExhaustedError,
    format_message,
    is_fault,
    is_not_found,
    is_quota_exceeded,
    is_rate_limited,
    is_resource_exhausted,
)
from .http_client import HTTPClient
from .retry_engine import RETRY_NOTICE, RetryEngine

__all__ = [
    # Config
    "AUTH_TOKEN_HEADER",
    "MAX_SEND_ATTEMPTS",
    "ClientConfig",
    "RetryConfig",
    "TimeoutConfig",
    # Context
    "RequestContext",
    "RetryState",
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
    "format_message",
    "is_fault",
    "is_not_found",
    "is_quota_exceeded",
    "is_rate_limited",
    "is_resource_exhausted",
    "ErrorHandler",
    "parse_fault_body",
    "parse_retry_after",
    # Transport
    "HTTPClient",
    "RetryEngine",
    "RETRY_NOTICE",
]
