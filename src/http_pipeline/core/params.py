# src/http_pipeline/core/params.py
"""
Query-параметры запроса.

Значения вычисляются лениво - в момент построения URL.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, TYPE_CHECKING
from urllib.parse import quote_plus

if TYPE_CHECKING:
    from .config import RequestConfig


class _FixedValue:
    """Supplier для статичного значения (сравнимый по значению)."""

    __slots__ = ("value",)

    def __init__(self, value: str):
        self.value = value

    def __call__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _FixedValue) and other.value == self.value

    def __hash__(self) -> int:
        return hash(self.value)


def _as_supplier(key: str, value: Any) -> Callable[[], str]:
    if callable(value):
        return value
    if value is None:
        raise ValueError(f"query param '{key}' has no value")
    return _FixedValue(value if isinstance(value, str) else str(value))


class RequestParams:
    """
    Упорядоченные пары key -> supplier значения.

    Args:
        params: Начальные параметры (значение - строка, объект или callable)
        encoded: Кодировать значения (quote_plus). False - вставлять как есть
        charset: Кодировка для percent-encoding

    Examples:
        >>> params = RequestParams({"page": 1}).with_param("q", "a b")
        >>> params.to_url_part()
        '?page=1&q=a+b'
    """

    __slots__ = ("_params", "_encoded", "_charset")

    def __init__(
        self,
        params: Optional[Mapping[str, Any]] = None,
        *,
        encoded: bool = True,
        charset: str = "utf-8",
    ):
        suppliers: Dict[str, Callable[[], str]] = {}
        for key, value in (params or {}).items():
            suppliers[str(key)] = _as_supplier(str(key), value)
        self._params: Mapping[str, Callable[[], str]] = MappingProxyType(suppliers)
        self._encoded = encoded
        self._charset = charset

    @property
    def encoded(self) -> bool:
        return self._encoded

    @property
    def charset(self) -> str:
        return self._charset

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequestParams):
            return NotImplemented
        return (
            dict(self._params) == dict(other._params)
            and self.encoded == other.encoded
            and self.charset == other.charset
        )

    def __hash__(self) -> int:
        return hash((tuple(self._params.items()), self.encoded, self.charset))

    def __repr__(self) -> str:
        return f"RequestParams(keys={list(self._params)}, encoded={self.encoded})"

    def keys(self):
        return self._params.keys()

    def evaluate(self) -> Dict[str, str]:
        """Вычислить все значения сейчас. Supplier, вернувший None, пропускается."""
        values = {}
        for key, supplier in self._params.items():
            value = supplier()
            if value is not None:
                values[key] = value if isinstance(value, str) else str(value)
        return values

    def with_param(self, key: str, value: Any) -> 'RequestParams':
        params = dict(self._params)
        params[str(key)] = _as_supplier(str(key), value)
        return self._copy(params, self.encoded, self.charset)

    def with_encoding(self, encoded: bool, charset: Optional[str] = None) -> 'RequestParams':
        return self._copy(dict(self._params), encoded, charset or self.charset)

    def to_url_part(self) -> str:
        """
        Построить хвост URL вида "?a=1&b=2".

        Кодируется только значение; ключ вставляется как есть.
        Пустые параметры дают пустую строку.
        """
        values = self.evaluate()
        if not values:
            return ""

        parts = []
        for key, value in values.items():
            if self.encoded:
                value = quote_plus(value, encoding=self.charset)
            parts.append(f"{key}={value}")
        return "?" + "&".join(parts)

    def to_config(self) -> 'RequestConfig':
        from .config import RequestConfig
        return RequestConfig(params=self)

    @classmethod
    def _copy(cls, params: Dict[str, Callable[[], str]], encoded: bool, charset: str) -> 'RequestParams':
        instance = cls.__new__(cls)
        instance._params = MappingProxyType(params)
        instance._encoded = encoded
        instance._charset = charset
        return instance
