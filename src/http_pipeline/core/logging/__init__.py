"""
Logging system for HTTP Pipeline.

Example:
    >>> from http_pipeline.core.logging import configure_logging, LoggingConfig
    >>>
    >>> configure_logging(LoggingConfig.create(level="DEBUG", format="colored"))
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import PipelineLogger, get_logger, configure_logging, DEFAULT_LOGGER_NAME
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    correlation_scope,
    new_correlation_id,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "PipelineLogger",
    "get_logger",
    "configure_logging",
    "DEFAULT_LOGGER_NAME",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "correlation_scope",
    "new_correlation_id",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
