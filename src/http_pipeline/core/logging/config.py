"""
Logging configuration for HTTP Pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_int(self) -> int:
        import logging
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    """Log output formats."""
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration of the pipeline logger.

    Attributes:
        level: Minimal level for emitted records
        format: Output format (json, text, colored)
        enable_console: Write to stdout
        enable_file: Write to a rotating file
        file_path: Path to log file (required if enable_file=True)
        max_bytes: File size before rotation (default: 10MB)
        backup_count: Rotated files to keep
        enable_correlation_id: Attach per-exchange correlation id to records
        extra_fields: Static fields added to every record (service, env, ...)

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.level, LogLevel):
            object.__setattr__(self, 'level', LogLevel(str(self.level).upper()))
        if not isinstance(self.format, LogFormat):
            object.__setattr__(self, 'format', LogFormat(str(self.format).lower()))
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be >= 0")
        object.__setattr__(self, 'extra_fields', MappingProxyType(dict(self.extra_fields)))

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        enable_file: bool = False,
        file_path: Optional[str] = None,
        max_bytes: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        enable_correlation_id: bool = True,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """
        Create LoggingConfig from plain string values.

        Example:
            >>> config = LoggingConfig.create(
            ...     level="DEBUG",
            ...     format="json",
            ...     enable_file=True,
            ...     file_path="/tmp/pipeline.log"
            ... )
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            enable_file=enable_file,
            file_path=file_path,
            max_bytes=max_bytes,
            backup_count=backup_count,
            enable_correlation_id=enable_correlation_id,
            extra_fields=extra_fields or {}
        )
