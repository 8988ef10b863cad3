"""
Logging configuration for Nova Client.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def numeric(self) -> int:
        """stdlib level number (logging.INFO, ...)."""
        return logging.getLevelName(self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Where and how the transports write their structured log lines.

    Retry notices ("Too many requests, retrying in <n>ms") are WARNING
    records, so any level above WARNING hides them.

    Attributes:
        level: Minimum level written by the owned handlers
        format: json (one object per line) or text (key=value suffix)
        enable_console: Write to stdout
        enable_file: Write to a rotating file at file_path
        max_bytes / backup_count: Rotation of the log file
        enable_correlation_id: Stamp each record with the request id
        mask_secrets: Redact tokens and passwords in structured fields
        extra_fields: Static fields on every record (region, tenant, ...)

    Example:
        >>> LoggingConfig.create(level="DEBUG", format="json", extra_fields={"region": "RegionOne"})
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    enable_correlation_id: bool = True
    mask_secrets: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

    @property
    def has_output(self) -> bool:
        """True if at least one handler would be attached."""
        return self.enable_console or self.enable_file

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        *,
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any
    ) -> "LoggingConfig":
        """
        Build from plain strings (env values, YAML).

        Args:
            level: Level name, case-insensitive
            format: "json" or "text", case-insensitive
            extra_fields: Static fields on every record
            **options: Any other LoggingConfig field

        Raises:
            ValueError: Unknown level/format or invalid combination

        Example:
            >>> LoggingConfig.create(level="debug", enable_file=True, file_path="/tmp/nova.log")
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            extra_fields=dict(extra_fields or {}),
            **options
        )
