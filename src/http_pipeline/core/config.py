"""
Система конфигурации запросов.

RequestConfig - частично заполненный immutable (frozen dataclass) слой.
Эффективная конфигурация запроса получается наложением слоёв:

    DEFAULT_CONFIG ⊕ конфиг клиента ⊕ метод ⊕ overrides вызова

Правила наложения:
- скаляры: побеждает последний слой, где поле задано (UNSET не затирает)
- headers: объединение по ключу, последний слой побеждает для одинаковых имён
- request/response interceptors: конкатенация в порядке слоёв
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Optional, Tuple, Union, TYPE_CHECKING

from .exceptions import ConfigurationError
from .headers import Headers
from .methods import RequestMethod
from .params import RequestParams

if TYPE_CHECKING:
    from .error_handler import ErrorHandler
    from .transformers import RequestTransformer, ResponseTransformer
    from .transport import Connection

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# UNSET SENTINEL
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _Unset:
    """Маркер "поле не задано в этом слое"."""

    _instance: Optional['_Unset'] = None

    def __new__(cls) -> '_Unset':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> '_Unset':
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> '_Unset':
        return self

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET and value is not None

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

StatusPredicate = Callable[[int], bool]
ConnectionCustomizer = Callable[['Connection'], None]


@dataclass(frozen=True)
class RequestConfig:
    """
    Слой конфигурации запроса.

    Все поля кроме списков interceptors по умолчанию UNSET.

    Args:
        base_url: Базовый адрес, к которому приклеивается path
        params: Query-параметры (RequestParams или dict)
        connect_timeout: Таймаут подключения (сек)
        read_timeout: Таймаут чтения (сек)
        headers: Заголовки (Headers или dict; значения - str или callable)
        method: HTTP метод
        use_caches: Разрешать кеширование на уровне транспорта
        proxy: URL прокси ("http://host:port")
        authenticator: Объект аутентификации транспорта (tuple, requests.auth.AuthBase, httpx.Auth)
        request_transformer: Сериализация тела запроса
        response_transformer: Десериализация тела ответа
        request_interceptors: Хуки перед отправкой (конкатенируются)
        response_interceptors: Хуки перед возвратом ответа (конкатенируются)
        ignore_status: Предикат status -> bool, True = не считать ошибкой
        error_handler: Обработчик HTTP ошибок
        connection_customizer: Последний хук настройки соединения

    Examples:
        >>> base = RequestConfig(base_url="https://api.example.com/", read_timeout=10)
        >>> call = RequestConfig(headers={"X-Trace": "1"})
        >>> effective = base.merge(call)
    """
    base_url: str = UNSET
    params: RequestParams = UNSET
    connect_timeout: float = UNSET
    read_timeout: float = UNSET
    headers: Headers = UNSET
    method: RequestMethod = UNSET
    use_caches: bool = UNSET
    proxy: str = UNSET
    authenticator: Any = UNSET
    request_transformer: 'RequestTransformer' = UNSET
    response_transformer: 'ResponseTransformer' = UNSET
    request_interceptors: Tuple[Any, ...] = field(default_factory=tuple)
    response_interceptors: Tuple[Any, ...] = field(default_factory=tuple)
    ignore_status: StatusPredicate = UNSET
    error_handler: Union['ErrorHandler', Callable[..., None]] = UNSET
    connection_customizer: ConnectionCustomizer = UNSET

    def __post_init__(self):
        """Нормализация и валидация."""
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', Headers(self.headers))
        if isinstance(self.params, dict):
            object.__setattr__(self, 'params', RequestParams(self.params))
        if is_set(self.method) and not isinstance(self.method, RequestMethod):
            object.__setattr__(self, 'method', RequestMethod.parse(self.method))

        for name in ('request_interceptors', 'response_interceptors'):
            value = getattr(self, name)
            if value is None or value is UNSET:
                object.__setattr__(self, name, ())
            elif not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

        for name in ('connect_timeout', 'read_timeout'):
            value = getattr(self, name)
            if is_set(value) and value <= 0:
                raise ValueError(f"{name} must be positive")

        for name in ('ignore_status', 'connection_customizer'):
            value = getattr(self, name)
            if is_set(value) and not callable(value):
                raise TypeError(f"{name} must be callable")

    # ==================== Наложение слоёв ====================

    def merge(self, *overrides: Optional['RequestConfig']) -> 'RequestConfig':
        """
        Создать новый конфиг: self, поверх которого наложены overrides.

        Чистая функция - ни self, ни overrides не меняются.
        None в overrides пропускается.

        Example:
            >>> effective = DEFAULT_CONFIG.merge(client_config, RequestMethod.GET.to_config())
        """
        result = self
        for layer in overrides:
            if layer is None:
                continue
            if not isinstance(layer, RequestConfig):
                raise TypeError(
                    f"Can only merge RequestConfig layers, got {type(layer).__name__}"
                )
            result = _overlay(result, layer)
        return result

    # ==================== Доступ ====================

    def require(self, name: str) -> Any:
        """
        Вернуть значение поля, которое обязано быть задано.

        Raises:
            ConfigurationError: Поле осталось UNSET после наложения
        """
        value = getattr(self, name)
        if not is_set(value):
            raise ConfigurationError(
                f"RequestConfig.{name} is not set. "
                f"Build clients with RestClient.create() to inherit DEFAULT_CONFIG."
            )
        return value

    def get(self, name: str, default: Any = None) -> Any:
        value = getattr(self, name)
        return value if is_set(value) else default

    def is_outputting(self) -> bool:
        """True для POST и PUT - только они пишут тело запроса."""
        return is_set(self.method) and self.method.is_outputting

    def set_fields(self) -> Dict[str, Any]:
        """Поля, заданные в этом слое (для логов и отладки)."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                if value:
                    result[f.name] = value
            elif is_set(value):
                result[f.name] = value
        return result

    # ==================== Copy-setters ====================

    def with_base_url(self, base_url: str) -> 'RequestConfig':
        return replace(self, base_url=base_url)

    def with_timeouts(self, connect: Optional[float] = None, read: Optional[float] = None) -> 'RequestConfig':
        """
        Создать новый конфиг с изменёнными таймаутами.

        Example:
            >>> new_config = config.with_timeouts(connect=3, read=30)
        """
        changes: Dict[str, Any] = {}
        if connect is not None:
            changes['connect_timeout'] = connect
        if read is not None:
            changes['read_timeout'] = read
        return replace(self, **changes)

    def with_headers(self, headers: Union[Headers, Dict[str, Any]]) -> 'RequestConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Заголовки объединяются с существующими в этом слое.
        """
        if isinstance(headers, dict):
            headers = Headers(headers)
        current = self.headers if is_set(self.headers) else Headers()
        return replace(self, headers=current.merged(headers))

    def with_params(self, params: Union[RequestParams, Dict[str, Any]]) -> 'RequestConfig':
        return replace(self, params=params)

    def with_method(self, method: Union[str, RequestMethod]) -> 'RequestConfig':
        return replace(self, method=RequestMethod.parse(method))

    def with_proxy(self, proxy: str) -> 'RequestConfig':
        return replace(self, proxy=proxy)

    def with_authenticator(self, authenticator: Any) -> 'RequestConfig':
        return replace(self, authenticator=authenticator)

    def with_use_caches(self, use_caches: bool) -> 'RequestConfig':
        return replace(self, use_caches=use_caches)

    def with_ignore_status(self, predicate: StatusPredicate) -> 'RequestConfig':
        return replace(self, ignore_status=predicate)

    def with_error_handler(self, handler: Any) -> 'RequestConfig':
        return replace(self, error_handler=handler)

    def with_transformers(
        self,
        request: Optional['RequestTransformer'] = None,
        response: Optional['ResponseTransformer'] = None,
    ) -> 'RequestConfig':
        changes: Dict[str, Any] = {}
        if request is not None:
            changes['request_transformer'] = request
        if response is not None:
            changes['response_transformer'] = response
        return replace(self, **changes)

    def with_connection_customizer(self, customizer: ConnectionCustomizer) -> 'RequestConfig':
        return replace(self, connection_customizer=customizer)

    def add_request_interceptor(self, interceptor: Any) -> 'RequestConfig':
        return replace(self, request_interceptors=self.request_interceptors + (interceptor,))

    def add_response_interceptor(self, interceptor: Any) -> 'RequestConfig':
        return replace(self, response_interceptors=self.response_interceptors + (interceptor,))


_LIST_FIELDS = ('request_interceptors', 'response_interceptors')
_SCALAR_FIELDS = tuple(
    f.name for f in fields(RequestConfig)
    if f.name not in _LIST_FIELDS and f.name != 'headers'
)


def _overlay(base: RequestConfig, layer: RequestConfig) -> RequestConfig:
    """Наложить один слой на base по правилам модуля."""
    changes: Dict[str, Any] = {}

    for name in _SCALAR_FIELDS:
        value = getattr(layer, name)
        if is_set(value):
            changes[name] = value

    if is_set(layer.headers):
        if is_set(base.headers):
            changes['headers'] = base.headers.merged(layer.headers)
        else:
            changes['headers'] = layer.headers

    for name in _LIST_FIELDS:
        extra = getattr(layer, name)
        if extra:
            changes[name] = getattr(base, name) + extra

    if not changes:
        return base
    return replace(base, **changes)


def merge_configs(base: RequestConfig, *overrides: Optional[RequestConfig]) -> RequestConfig:
    """Функциональная форма RequestConfig.merge."""
    return base.merge(*overrides)
