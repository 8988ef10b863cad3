"""
Main logger for Nova Client.

Wraps a stdlib logger and accepts structured keyword fields.
"""

import logging
from typing import Any, Optional, Union

from .config import LoggingConfig
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class NovaClientLogger:
    """
    Structured logger used by the transports and the retry engine.

    Two ways to build one:
    - ``NovaClientLogger(config)`` owns its handlers (console, rotating file);
    - ``NovaClientLogger.wrap(std_logger)`` forwards to a caller-supplied
      ``logging.Logger`` and leaves its handlers untouched.

    Example:
        >>> logger = NovaClientLogger(LoggingConfig.create(level="INFO"))
        >>> logger.warning("Too many requests, retrying in 500ms", attempt=1)
    """

    def __init__(
        self,
        config: Optional[LoggingConfig] = None,
        name: str = "nova_client",
        _logger: Optional[logging.Logger] = None
    ):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False
        self._owns_handlers = _logger is None

        if _logger is not None:
            self._logger = _logger
            return

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level.numeric)
        self._logger.propagate = False

        # Remove existing handlers (if reinitializing)
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)
        level = self.config.level.numeric

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @classmethod
    def wrap(cls, logger: logging.Logger) -> "NovaClientLogger":
        """
        Adapt an existing stdlib logger as a sink.

        Example:
            >>> buf = io.StringIO()
            >>> std = logging.getLogger("test.retries")
            >>> std.addHandler(logging.StreamHandler(buf))
            >>> sink = NovaClientLogger.wrap(std)
        """
        return cls(name=logger.name, _logger=logger)

    @property
    def logger(self) -> logging.Logger:
        """Underlying stdlib logger."""
        return self._logger

    def _log(self, level: int, message: str, fields: dict) -> None:
        if self.config.mask_secrets:
            fields = mask_sensitive_data(fields)
        self._logger.log(level, message, extra=fields)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def close(self) -> None:
        """
        Flush and close owned handlers. Idempotent.

        Wrapped loggers are left alone: their handlers belong to the caller.
        """
        if self._closed:
            return

        if self._owns_handlers:
            for handler in self._logger.handlers[:]:
                try:
                    handler.flush()
                    handler.close()
                except (OSError, ValueError):
                    pass
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


LoggerSink = Union[NovaClientLogger, logging.Logger, None]


def as_sink(logger: LoggerSink) -> Optional[NovaClientLogger]:
    """
    Normalize an injected logging sink.

    Returns None when no sink is given: retries then proceed silently.
    """
    if logger is None or isinstance(logger, NovaClientLogger):
        return logger
    if isinstance(logger, logging.Logger):
        return NovaClientLogger.wrap(logger)
    raise TypeError(f"Unsupported logger type: {type(logger).__name__}")
