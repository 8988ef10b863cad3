"""
Logging system for Nova Client.

Example:
    >>> from nova_client.core.logging import NovaClientLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="json")
    >>> logger = NovaClientLogger(config)
    >>> logger.info("Request started", method="GET", url="https://compute/v2/os-floating-ips")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import NovaClientLogger, LoggerSink, as_sink
from .formatters import JSONFormatter, TextFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "NovaClientLogger",
    "LoggerSink",
    "as_sink",
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "create_console_handler",
    "create_file_handler",
]
