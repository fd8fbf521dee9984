"""
Log filters: per-exchange correlation id and static extra fields.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional


# Thread-local storage for correlation ID
_correlation_id_storage = threading.local()


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


def set_correlation_id(correlation_id: str) -> None:
    """
    Set correlation ID for current thread.

    Example:
        >>> set_correlation_id("req-12345")
        >>> logger.info("Exchange started")  # record carries correlation_id
    """
    _correlation_id_storage.value = correlation_id


def get_correlation_id() -> Optional[str]:
    return getattr(_correlation_id_storage, 'value', None)


def clear_correlation_id() -> None:
    if hasattr(_correlation_id_storage, 'value'):
        delattr(_correlation_id_storage, 'value')


@contextmanager
def correlation_scope(correlation_id: Optional[str] = None) -> Iterator[str]:
    """
    Bind a correlation id to the current thread for the duration of a block.

    The previous id (if any) is restored on exit, so nested exchanges
    started from an interceptor keep the outer id afterwards.

    Example:
        >>> with correlation_scope() as cid:
        ...     logger.info("Exchange started")
    """
    previous = get_correlation_id()
    current = correlation_id or new_correlation_id()
    set_correlation_id(current)
    try:
        yield current
    finally:
        if previous is None:
            clear_correlation_id()
        else:
            set_correlation_id(previous)


class CorrelationIdFilter(logging.Filter):
    """Adds the thread's correlation ID to every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id and not hasattr(record, 'correlation_id'):
            record.correlation_id = correlation_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service name, environment, ...) to all records.

    Fields already present on the record are not overwritten.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "billing"}))
    """

    def __init__(self, extra_fields: Mapping[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
