# src/http_pipeline/core/headers.py
"""
Заголовки запроса/ответа.

Значение заголовка - либо строка, либо функция без аргументов, которая
вычисляется в момент применения к соединению (например, обновляемый токен).
Headers неизменяем: каждый with_* возвращает новый экземпляр.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import RequestConfig

HeaderValue = Union[str, Callable[[], str]]


@dataclass(frozen=True)
class Header:
    """
    Один заголовок.

    Args:
        name: Имя заголовка (как было передано)
        value: Строка или supplier, вычисляемый при каждом запросе
    """
    name: str
    value: HeaderValue

    @property
    def is_dynamic(self) -> bool:
        return callable(self.value)

    def resolve(self) -> Optional[str]:
        """Вернуть текущее значение (supplier вызывается заново).

        None от supplier означает, что заголовок в этот раз не отправляется.
        """
        if callable(self.value):
            value = self.value()
            return None if value is None else str(value)
        return self.value

    def __str__(self) -> str:
        if self.is_dynamic:
            return f"{self.name}=<dynamic>"
        return f"{self.name}={self.value}"


class Headers(Mapping[str, Header]):
    """
    Упорядоченный набор заголовков.

    Ключи сравниваются без учёта регистра; последняя запись с тем же
    именем побеждает, но сохраняет позицию первой.

    Examples:
        >>> headers = Headers({"Accept": "application/json"})
        >>> headers = headers.with_header("Authorization", lambda: f"Bearer {token()}")
        >>> headers.get_safe_value("accept")
        'application/json'
    """

    __slots__ = ("_entries",)

    def __init__(self, headers: Optional[Union[Mapping[str, HeaderValue], Iterable[Header]]] = None):
        entries: Dict[str, Header] = {}
        if headers is not None:
            items = headers.items() if isinstance(headers, Mapping) else ((h.name, h.value) for h in headers)
            for name, value in items:
                if isinstance(value, Header):
                    value = value.value
                _validate(name, value)
                entries[name.lower()] = Header(name, value)
        self._entries: Mapping[str, Header] = MappingProxyType(entries)

    @classmethod
    def from_fields(cls, fields: Optional[Mapping[str, Union[str, List[str], Tuple[str, ...]]]]) -> 'Headers':
        """
        Построить Headers из заголовков ответа транспорта.

        Множественные значения склеиваются через ", ".
        """
        result: Dict[str, str] = {}
        for name, value in (fields or {}).items():
            if name is None:
                continue
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(v) for v in value)
            result[name] = str(value)
        return cls(result)

    # ==================== Mapping ====================

    def __getitem__(self, name: str) -> Header:
        return self._entries[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (header.name for header in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def __repr__(self) -> str:
        return f"Headers({', '.join(str(h) for h in self._entries.values())})"

    # ==================== Доступ ====================

    def get_header(self, name: str) -> Optional[Header]:
        return self._entries.get(name.lower())

    def get_safe_value(self, name: str) -> str:
        """Значение заголовка или пустая строка, если его нет."""
        header = self.get_header(name)
        if header is None:
            return ""
        return header.resolve() or ""

    def resolve(self) -> Dict[str, str]:
        """
        Вычислить все значения (suppliers вызываются сейчас).

        Returns:
            Обычный dict name -> str для транспорта; заголовки, чей
            supplier вернул None, пропускаются
        """
        resolved = {}
        for header in self._entries.values():
            value = header.resolve()
            if value is not None:
                resolved[header.name] = value
        return resolved

    # ==================== Построение ====================

    def with_header(self, name: str, value: HeaderValue) -> 'Headers':
        _validate(name, value)
        entries = dict(self._entries)
        entries[name.lower()] = Header(name, value)
        return self._from_entries(entries)

    def without_header(self, name: str) -> 'Headers':
        entries = dict(self._entries)
        entries.pop(name.lower(), None)
        return self._from_entries(entries)

    def merged(self, other: Optional['Headers']) -> 'Headers':
        """
        Объединить с другим набором: ключи other перезаписывают ключи self,
        остальные ключи обоих наборов сохраняются.
        """
        if not other:
            return self
        entries = dict(self._entries)
        entries.update(other._entries)
        return self._from_entries(entries)

    def with_accept(self, value: HeaderValue) -> 'Headers':
        return self.with_header("Accept", value)

    def with_content_type(self, value: HeaderValue) -> 'Headers':
        return self.with_header("Content-Type", value)

    def with_user_agent(self, value: HeaderValue) -> 'Headers':
        return self.with_header("User-Agent", value)

    def with_authorization(self, value: HeaderValue) -> 'Headers':
        return self.with_header("Authorization", value)

    def to_config(self) -> 'RequestConfig':
        """Обернуть в RequestConfig для передачи как override."""
        from .config import RequestConfig
        return RequestConfig(headers=self)

    @classmethod
    def _from_entries(cls, entries: Dict[str, Header]) -> 'Headers':
        instance = cls.__new__(cls)
        instance._entries = MappingProxyType(entries)
        return instance


def _validate(name: str, value: HeaderValue) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError("header name must be a non-empty string")
    if not isinstance(value, str) and not callable(value):
        raise TypeError(
            f"header '{name}' value must be str or callable, got {type(value).__name__}"
        )
