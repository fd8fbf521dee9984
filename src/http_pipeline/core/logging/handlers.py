"""
Console and rotating file handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional


def _prepare(handler: logging.Handler, level: int, formatter: logging.Formatter,
             filters: Optional[Iterable[logging.Filter]]) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Iterable[logging.Filter]] = None
) -> logging.StreamHandler:
    """Create stdout handler."""
    handler = logging.StreamHandler(sys.stdout)
    _prepare(handler, level, formatter, filters)
    return handler


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    filters: Optional[Iterable[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Create rotating file handler.

    Parent directories are created if missing.

    File rotation:
        pipeline.log       <- current
        pipeline.log.1     <- previous
        ...
        pipeline.log.N     <- oldest (N = backup_count)
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    _prepare(handler, level, formatter, filters)
    return handler
