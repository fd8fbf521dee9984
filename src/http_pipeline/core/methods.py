# src/http_pipeline/core/methods.py

from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .config import RequestConfig


class RequestMethod(str, Enum):
    """HTTP методы, поддерживаемые пайплайном."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: Union[str, 'RequestMethod']) -> 'RequestMethod':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(
                f"Unsupported HTTP method: {value!r}. "
                f"Available: {', '.join(m.value for m in cls)}"
            ) from None

    @property
    def is_outputting(self) -> bool:
        """Метод передаёт тело запроса (только POST и PUT)."""
        return self in (RequestMethod.POST, RequestMethod.PUT)

    def to_config(self) -> 'RequestConfig':
        """Слой конфигурации, задающий только метод."""
        from .config import RequestConfig
        return RequestConfig(method=self)

    def __str__(self) -> str:
        return self.value
