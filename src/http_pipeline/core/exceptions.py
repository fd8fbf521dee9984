"""
Иерархия исключений HTTP Pipeline.

Классификация:
- RequestIOError - I/O класс: ошибки транспорта и трансформеров.
  Пробрасываются вызывающему (или в Future) без ретраев.
- HttpStatusCodeError - статус > 299, не проигнорированный предикатом.
  Передаётся в ErrorHandler, а не вызывающему.
- ConfigurationError - эффективная конфигурация неполна.

Отмена запроса interceptor'ом исключением НЕ является.
"""

from typing import Optional, TYPE_CHECKING

import httpx
import requests

if TYPE_CHECKING:
    from .response import HttpResponse

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение HTTP Pipeline."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)


class ConfigurationError(HTTPClientException):
    """Ошибка конфигурации."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# I/O ОШИБКИ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestIOError(HTTPClientException):
    """
    Ошибка ввода-вывода при выполнении обмена.

    Общий предок для ошибок транспорта и трансформеров.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)


class TransportError(RequestIOError):
    """Ошибка транспорта (сокет, DNS, TLS, протокол)."""
    pass


class NetworkError(TransportError):
    """Сетевая ошибка."""
    pass


class TimeoutError(NetworkError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect' или 'read')
    """

    def __init__(self, message: str, url: Optional[str] = None, timeout_type: Optional[str] = None):
        self.timeout_type = timeout_type
        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"
        super().__init__(msg, url)


class ConnectionError(NetworkError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Connection reset
    - DNS resolution failed
    """
    pass


class ProxyError(NetworkError):
    """
    Ошибка прокси.

    Args:
        message: Сообщение
        url: URL
        proxy: Адрес прокси
    """

    def __init__(self, message: str, url: Optional[str] = None, proxy: Optional[str] = None):
        self.proxy = proxy
        msg = message
        if proxy:
            msg += f" (proxy: {proxy})"
        super().__init__(msg, url)


class TransformError(RequestIOError):
    """Ошибка трансформера тела."""
    pass


class RequestEncodeError(TransformError):
    """Не удалось сериализовать тело запроса."""
    pass


class ResponseDecodeError(TransformError):
    """
    Не удалось декодировать тело ответа в запрошенный тип.

    Args:
        message: Сообщение
        target_type: Запрошенный тип
        url: URL
    """

    def __init__(self, message: str, target_type: object = None, url: Optional[str] = None):
        self.target_type = target_type
        msg = message
        if target_type is not None:
            msg += f" (target: {getattr(target_type, '__name__', target_type)})"
        super().__init__(msg, url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP СТАТУС
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpStatusCodeError(HTTPClientException):
    """
    Ошибочный статус ответа (> 299 и не проигнорирован).

    Текст исключения - status message ответа.

    Args:
        error_response: HttpResponse с телом-строкой из error stream
    """

    def __init__(self, error_response: 'HttpResponse[str]'):
        self.error_response = error_response
        super().__init__(error_response.status_message or f"HTTP {error_response.status_code}")

    @property
    def status_code(self) -> int:
        return self.error_response.status_code

    @property
    def url(self) -> str:
        return self.error_response.url

    @property
    def body(self) -> Optional[str]:
        return self.error_response.body


class BadRequestError(HttpStatusCodeError):
    """400 Bad Request."""
    pass


class UnauthorizedError(HttpStatusCodeError):
    """401 Unauthorized."""
    pass


class ForbiddenError(HttpStatusCodeError):
    """403 Forbidden."""
    pass


class NotFoundError(HttpStatusCodeError):
    """404 Not Found."""
    pass


class ServerError(HttpStatusCodeError):
    """5xx ошибка сервера."""
    pass


def status_error_for(error_response: 'HttpResponse[str]') -> HttpStatusCodeError:
    """
    Подобрать класс исключения по статус коду.

    Examples:
        >>> err = status_error_for(response_404)
        >>> assert isinstance(err, NotFoundError)
    """
    status_code = error_response.status_code

    if status_code == 400:
        return BadRequestError(error_response)
    elif status_code == 401:
        return UnauthorizedError(error_response)
    elif status_code == 403:
        return ForbiddenError(error_response)
    elif status_code == 404:
        return NotFoundError(error_response)
    elif 500 <= status_code < 600:
        return ServerError(error_response)
    return HttpStatusCodeError(error_response)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def classify_requests_exception(
    exc: Exception,
    url: str,
    proxy: Optional[str] = None
) -> HTTPClientException:
    """
    Конвертировать requests.exceptions в наши исключения.

    Args:
        exc: Исключение из requests
        url: URL запроса
        proxy: Прокси, через который шёл запрос

    Returns:
        Наше исключение (I/O класс)

    Examples:
        >>> exc = requests.exceptions.ConnectTimeout()
        >>> our_exc = classify_requests_exception(exc, "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
    """
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect")

    elif isinstance(exc, requests.exceptions.ReadTimeout):
        return TimeoutError("Request timeout", url, timeout_type="read")

    elif isinstance(exc, requests.exceptions.Timeout):
        return TimeoutError("Request timeout", url)

    elif isinstance(exc, requests.exceptions.ProxyError):
        return ProxyError("Proxy error", url, proxy=proxy)

    elif isinstance(exc, requests.exceptions.ConnectionError):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, requests.exceptions.RequestException):
        return TransportError(f"Request failed: {exc}", url)

    # Неизвестная ошибка - оборачиваем
    return TransportError(str(exc), url)


def classify_httpx_exception(
    exc: Exception,
    url: str,
    proxy: Optional[str] = None
) -> HTTPClientException:
    """Конвертировать httpx исключения в наши (аналог classify_requests_exception)."""

    if isinstance(exc, httpx.ConnectTimeout):
        return TimeoutError("Request timeout", url, timeout_type="connect")

    elif isinstance(exc, httpx.ReadTimeout):
        return TimeoutError("Request timeout", url, timeout_type="read")

    elif isinstance(exc, httpx.TimeoutException):
        return TimeoutError("Request timeout", url)

    elif isinstance(exc, httpx.ProxyError):
        return ProxyError("Proxy error", url, proxy=proxy)

    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return ConnectionError(f"Connection error: {exc}", url)

    elif isinstance(exc, httpx.HTTPError):
        return TransportError(f"Request failed: {exc}", url)

    return TransportError(str(exc), url)
