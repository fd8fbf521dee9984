# src/http_pipeline/core/error_handler.py
"""
Обработчики HTTP ошибок.

Вызываются пайплайном ровно один раз на ответ со статусом, который
классификатор признал ошибкой. Вызывающий при этом получает
Exchange с outcome FAILED, а не исключение - если только обработчик
сам не бросит исключение (RaisingErrorHandler).
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union

from .exceptions import HttpStatusCodeError, status_error_for
from .logging import PipelineLogger


class ErrorHandler(ABC):
    """Обработчик ошибочного статуса ответа."""

    @abstractmethod
    def on_http_error(self, error: HttpStatusCodeError) -> None:
        pass

    def __call__(self, error: HttpStatusCodeError) -> None:
        self.on_http_error(error)


class LoggingErrorHandler(ErrorHandler):
    """
    Обработчик по умолчанию: пишет warning в лог и ничего не бросает.

    Args:
        logger: PipelineLogger (по умолчанию логгер "http_pipeline")
    """

    def __init__(self, logger: Optional[PipelineLogger] = None):
        self._logger = logger or PipelineLogger(name="http_pipeline.errors")

    def on_http_error(self, error: HttpStatusCodeError) -> None:
        self._logger.warning(
            "Unhandled HTTP error",
            status_code=error.status_code,
            status_message=str(error),
            url=error.url,
            body_preview=(error.body or "")[:200],
        )


class RaisingErrorHandler(ErrorHandler):
    """
    Бросает типизированное исключение по статусу.

    404 -> NotFoundError, 401 -> UnauthorizedError, 5xx -> ServerError, ...

    Example:
        >>> client = RestClient.create(RequestConfig(error_handler=RaisingErrorHandler()))
        >>> client.get("/missing", str)  # raises NotFoundError
    """

    def on_http_error(self, error: HttpStatusCodeError) -> None:
        raise status_error_for(error.error_response) from None


class CollectingErrorHandler(ErrorHandler):
    """
    Складывает ошибки в список (для тестов и диагностики).

    Потокобезопасен - один экземпляр можно отдать async клиенту.
    """

    def __init__(self):
        self._errors: List[HttpStatusCodeError] = []
        self._lock = threading.Lock()

    def on_http_error(self, error: HttpStatusCodeError) -> None:
        with self._lock:
            self._errors.append(error)

    @property
    def errors(self) -> List[HttpStatusCodeError]:
        with self._lock:
            return list(self._errors)

    @property
    def last(self) -> Optional[HttpStatusCodeError]:
        with self._lock:
            return self._errors[-1] if self._errors else None

    def clear(self) -> None:
        with self._lock:
            self._errors.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)


class CallbackErrorHandler(ErrorHandler):
    """Адаптер для обычной функции error -> None."""

    def __init__(self, callback: Callable[[HttpStatusCodeError], None]):
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._callback = callback

    def on_http_error(self, error: HttpStatusCodeError) -> None:
        self._callback(error)


ErrorHandlerLike = Union[ErrorHandler, Callable[[HttpStatusCodeError], None]]


def as_error_handler(handler: ErrorHandlerLike) -> ErrorHandler:
    if isinstance(handler, ErrorHandler):
        return handler
    return CallbackErrorHandler(handler)
