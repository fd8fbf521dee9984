# src/http_pipeline/core/transport.py
"""
Контракт транспорта.

Transport открывает Connection на один обмен. Connection накапливает
настройки запроса (метод, таймауты, заголовки, тело) и выполняет запрос
лениво - при первом обращении к статусу, заголовкам или телу ответа.
Это позволяет request interceptors менять соединение до отправки.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import TransportError
from .methods import RequestMethod


@dataclass(frozen=True)
class RawResponse:
    """Ответ транспорта до классификации и декодирования."""

    status_code: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""
    encoding: Optional[str] = None


class Connection(ABC):
    """
    Одно HTTP соединение (один обмен).

    Подклассы реализуют только _perform() (и при необходимости _close()).

    Example:
        >>> conn = transport.open("https://api.example.com/users")
        >>> conn.set_request_method(RequestMethod.GET)
        >>> conn.set_request_property("Accept", "application/json")
        >>> conn.status_code   # запрос уходит здесь
        200
    """

    def __init__(self, url: str, proxy: Optional[str] = None):
        self.url = url
        self.proxy = proxy
        self.connect_timeout: Optional[float] = None
        self.read_timeout: Optional[float] = None
        self.method = RequestMethod.GET
        self.do_output = False
        self.use_caches = True
        self.authenticator: Any = None
        self._properties: Dict[str, tuple] = {}
        self._body: Optional[bytes] = None
        self._response: Optional[RawResponse] = None
        self._disconnected = False

    # ==================== Настройка запроса ====================

    def set_connect_timeout(self, seconds: Optional[float]) -> None:
        self._check_not_sent()
        self.connect_timeout = seconds

    def set_read_timeout(self, seconds: Optional[float]) -> None:
        self._check_not_sent()
        self.read_timeout = seconds

    def set_request_method(self, method: Union[str, RequestMethod]) -> None:
        self._check_not_sent()
        self.method = RequestMethod.parse(method)

    def set_do_output(self, do_output: bool) -> None:
        self._check_not_sent()
        self.do_output = do_output

    def set_use_caches(self, use_caches: bool) -> None:
        """Флаг локального кеша; на заголовки запроса не влияет."""
        self._check_not_sent()
        self.use_caches = use_caches

    def set_request_property(self, name: str, value: str) -> None:
        """Установить заголовок запроса (перезаписывает без учёта регистра имени)."""
        self._check_not_sent()
        self._properties[name.lower()] = (name, value)

    def get_request_property(self, name: str) -> Optional[str]:
        entry = self._properties.get(name.lower())
        return entry[1] if entry else None

    @property
    def request_properties(self) -> Dict[str, str]:
        return {name: value for name, value in self._properties.values()}

    def set_authenticator(self, authenticator: Any) -> None:
        self._check_not_sent()
        self.authenticator = authenticator

    def write_body(self, data: Union[bytes, str], encoding: str = "utf-8") -> None:
        """
        Записать тело запроса.

        Raises:
            TransportError: Соединение не настроено на вывод (do_output=False)
                или запрос уже отправлен
        """
        self._check_not_sent()
        if not self.do_output:
            raise TransportError(
                f"Connection is not configured for output (method {self.method})", self.url
            )
        if isinstance(data, str):
            data = data.encode(encoding)
        self._body = data

    @property
    def body(self) -> Optional[bytes]:
        return self._body

    # ==================== Ответ ====================

    @property
    def status_code(self) -> int:
        return self._ensure_response().status_code

    @property
    def status_message(self) -> str:
        return self._ensure_response().reason

    @property
    def header_fields(self) -> Mapping[str, str]:
        return self._ensure_response().headers

    @property
    def content_encoding(self) -> Optional[str]:
        return self._ensure_response().encoding

    def read_body(self) -> bytes:
        return self._ensure_response().content

    def read_error_body(self) -> bytes:
        """Тело ответа с ошибочным статусом."""
        return self._ensure_response().content

    @property
    def sent(self) -> bool:
        return self._response is not None

    @property
    def disconnected(self) -> bool:
        return self._disconnected

    def disconnect(self) -> None:
        """Освободить соединение. Идемпотентно."""
        if self._disconnected:
            return
        self._disconnected = True
        self._close()

    # ==================== Реализация ====================

    @abstractmethod
    def _perform(self) -> RawResponse:
        """
        Выполнить запрос с накопленными настройками.

        Raises:
            TransportError: Ошибка сети, таймаут, прокси
        """
        pass

    def _close(self) -> None:
        pass

    def _ensure_response(self) -> RawResponse:
        if self._response is None:
            if self._disconnected:
                raise TransportError("Connection is closed", self.url)
            self._response = self._perform()
        return self._response

    def _check_not_sent(self) -> None:
        if self._response is not None:
            raise TransportError("Request already sent", self.url)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.method} {self.url}>"


class Transport(ABC):
    """
    Фабрика соединений.

    Example:
        >>> with RequestsTransport() as transport:
        ...     client = RestClient.create(config, transport=transport)
    """

    @abstractmethod
    def open(self, url: str, proxy: Optional[str] = None) -> Connection:
        pass

    def close(self) -> None:
        """Освободить ресурсы транспорта (сессии, пулы)."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
