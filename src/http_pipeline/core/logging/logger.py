"""
Main logger for HTTP Pipeline.
"""

import logging
import threading
from typing import Any, Optional

from .config import LoggingConfig
from .formatters import get_formatter
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data

DEFAULT_LOGGER_NAME = "http_pipeline"


class PipelineLogger:
    """
    Structured logger used by the request executor.

    Keyword arguments of every log call become record fields
    (``extra``) after masking sensitive values.

    Two modes:
    - without config: records go to ``logging.getLogger(name)`` untouched,
      the application decides where they end up
    - with LoggingConfig: the logger gets its own handlers (console and/or
      rotating file), stops propagating and attaches correlation id / extra
      fields filters

    Example:
        >>> config = LoggingConfig.create(level="INFO", format="colored")
        >>> logger = PipelineLogger(config)
        >>> logger.info("Exchange started", method="GET", url="https://api.com")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = DEFAULT_LOGGER_NAME):
        self.config = config
        self.name = name
        self._closed = False
        self._logger = logging.getLogger(name)

        if config is not None:
            self._configure(config)

    def _configure(self, config: LoggingConfig) -> None:
        level = config.level.to_int()
        self._logger.setLevel(level)
        self._logger.propagate = False

        # Reinitializing replaces handlers of the previous instance
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        filters = []
        if config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if config.extra_fields:
            filters.append(ExtraFieldsFilter(config.extra_fields))

        formatter = get_formatter(config.format.value)

        if config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if config.enable_file and config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=config.max_bytes,
                backup_count=config.backup_count,
                filters=filters
            ))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, fields: Any, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Example:
            >>> logger.info("Exchange completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the current traceback. Call from an except block."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close handlers owned by this logger.

        Idempotent. A logger created without config owns no handlers.
        """
        if self._closed:
            return

        if self.config is not None:
            for handler in self._logger.handlers[:]:
                try:
                    handler.flush()
                    handler.close()
                except (OSError, ValueError):
                    # Stream already closed by the interpreter
                    pass
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


_default_logger: Optional[PipelineLogger] = None
_default_lock = threading.Lock()


def get_logger(config: Optional[LoggingConfig] = None) -> PipelineLogger:
    """
    Process-wide pipeline logger.

    Config is only used on the first call; use configure_logging to replace it.
    """
    global _default_logger

    with _default_lock:
        if _default_logger is None:
            _default_logger = PipelineLogger(config)
        return _default_logger


def configure_logging(config: LoggingConfig) -> PipelineLogger:
    """
    Replace the process-wide logger with a configured one.

    Example:
        >>> configure_logging(LoggingConfig.create(level="DEBUG", format="json"))
    """
    global _default_logger

    with _default_lock:
        if _default_logger is not None:
            _default_logger.close()
        _default_logger = PipelineLogger(config)
        return _default_logger
