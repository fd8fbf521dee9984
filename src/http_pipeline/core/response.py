# src/http_pipeline/core/response.py

from typing import Generic, Optional, Type, TypeVar, TYPE_CHECKING

from .headers import Headers

if TYPE_CHECKING:
    from .config import RequestConfig

T = TypeVar("T")

_TRUE_STRINGS = {"true"}


class HttpResponse(Generic[T]):
    """
    Результат одного обмена.

    Attributes:
        body: Тело нужного типа (None для HEAD)
        headers: Заголовки ответа
        status_code: HTTP статус
        status_message: Reason phrase ("OK", "Not Found", ...)
        config: Эффективная конфигурация, с которой выполнен запрос
        url: Итоговый URL (base + path + params)
    """

    __slots__ = ("body", "headers", "status_code", "status_message", "config", "url")

    def __init__(
        self,
        body: Optional[T],
        headers: Headers,
        status_code: int,
        status_message: str,
        config: 'RequestConfig',
        url: str,
    ):
        self.body = body
        self.headers = headers
        self.status_code = status_code
        self.status_message = status_message
        self.config = config
        self.url = url

    def set_body(self, body: Optional[T]) -> None:
        """Заменить тело (для response interceptors)."""
        self.body = body

    @property
    def ok(self) -> bool:
        return self.status_code <= 299

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_code}] {self.url}>"


class PrimitiveBody:
    """
    Сырое тело ответа без pluggable трансформера.

    Используется как response_type, когда нужно само тело, а также
    внутри пайплайна для примитивных типов (str, int, float, bool, bytes).

    Examples:
        >>> body = client.get_for_object("/count", PrimitiveBody)
        >>> body.as_int()
        42
    """

    __slots__ = ("raw", "encoding")

    def __init__(self, raw: bytes, encoding: Optional[str] = None):
        self.raw = raw or b""
        self.encoding = encoding or "utf-8"

    def as_bytes(self) -> bytes:
        return self.raw

    def as_string(self, include_line_breaks: bool = True) -> str:
        text = self.raw.decode(self.encoding, errors="replace")
        if include_line_breaks:
            return text
        return text.replace("\r", "").replace("\n", "")

    def as_int(self) -> int:
        return int(self.as_string().strip())

    def as_float(self) -> float:
        return float(self.as_string().strip())

    def as_bool(self) -> bool:
        """Как Boolean.parseBoolean: True только для "true" (без учёта регистра)."""
        return self.as_string().strip().lower() in _TRUE_STRINGS

    def as_type(self, target: Type[T]) -> T:
        """
        Декодировать в один из примитивных типов.

        Raises:
            ValueError: Тело не парсится в target
            TypeError: target не примитивный тип
        """
        if target is PrimitiveBody:
            return self  # type: ignore[return-value]
        if target is str:
            return self.as_string()  # type: ignore[return-value]
        if target is bytes:
            return self.as_bytes()  # type: ignore[return-value]
        if target is bool:
            return self.as_bool()  # type: ignore[return-value]
        if target is int:
            return self.as_int()  # type: ignore[return-value]
        if target is float:
            return self.as_float()  # type: ignore[return-value]
        raise TypeError(f"{target!r} is not a primitive body type")

    def __len__(self) -> int:
        return len(self.raw)

    def __repr__(self) -> str:
        return f"PrimitiveBody({len(self.raw)} bytes, encoding={self.encoding!r})"


PRIMITIVE_TYPES = (str, bytes, bool, int, float)


def is_primitive_type(target: object) -> bool:
    return target is PrimitiveBody or target in PRIMITIVE_TYPES
