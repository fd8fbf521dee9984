# src/http_pipeline/core/rest_client.py
import time
from typing import Any, Optional, Union

from .classifier import is_error
from .config import RequestConfig, is_set
from .error_handler import as_error_handler
from .exceptions import HttpStatusCodeError, ResponseDecodeError
from .exchange import Exchange, ExchangeOutcome
from .headers import Headers
from .logging import PipelineLogger, correlation_scope
from .methods import RequestMethod
from .params import RequestParams
from .response import HttpResponse, PrimitiveBody, is_primitive_type
from .transport import Connection, Transport
from ..interceptors.base import run_request_interceptors, run_response_interceptors


def build_url(base_url: Optional[str], path: str, params: Optional[RequestParams] = None) -> str:
    """
    Строит итоговый URL: base_url + path + query.

    - абсолютный path (http:// или https://) используется как есть
    - base_url и path склеиваются ровно через один слеш
    - если в path уже есть "?", параметры добавляются через "&"

    Examples:
        >>> build_url("https://api.example.com/", "users/1")
        'https://api.example.com/users/1'
        >>> build_url("https://api.example.com", "/search?q=x", RequestParams({"page": 2}))
        'https://api.example.com/search?q=x&page=2'
    """
    if not base_url or path.startswith(("http://", "https://")):
        url = path
    elif path:
        url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    else:
        url = base_url

    query = params.to_url_part() if params else ""
    if query and "?" in url:
        query = "&" + query[1:]
    return url + query


class RestClient:
    """
    Синхронный HTTP клиент поверх конфигурируемого пайплайна.

    Каждый вызов строит эффективную конфигурацию:

        конфиг клиента ⊕ метод ⊕ конфиги вызова

    и выполняет ровно один обмен. Клиент неизменяем: with_config()
    возвращает новый клиент, исходный не меняется.

    Example:
        >>> client = RestClient.create(RequestConfig(base_url="https://api.example.com"))
        >>> user = client.get_for_object("/users/1", User)
        >>> client.post("/users", User(name="Ann"), User, RequestConfig(headers={"X-Trace": "1"}))
    """

    def __init__(
        self,
        config: RequestConfig,
        transport: Optional[Transport] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        """
        Args:
            config: Полная конфигурация (обычно DEFAULT_CONFIG ⊕ свой слой, см. create())
            transport: Транспорт (по умолчанию RequestsTransport, принадлежит клиенту)
            logger: PipelineLogger (по умолчанию логгер "http_pipeline")
        """
        owns_transport = transport is None
        if transport is None:
            # Lazy import to avoid circular dependency
            from ..transports.requests_transport import RequestsTransport
            transport = RequestsTransport()

        object.__setattr__(self, '_config', config)
        object.__setattr__(self, '_transport', transport)
        object.__setattr__(self, '_owns_transport', owns_transport)
        object.__setattr__(self, '_logger', logger or PipelineLogger())
        object.__setattr__(self, '_initialized', True)

    def __setattr__(self, name, value):
        """Запретить изменение после init (immutability)."""
        if hasattr(self, '_initialized'):
            raise RuntimeError(
                f"Cannot modify '{name}' - RestClient is immutable. "
                f"Use with_config() to derive a new client."
            )
        object.__setattr__(self, name, value)

    @classmethod
    def create(
        cls,
        config: Optional[RequestConfig] = None,
        transport: Optional[Transport] = None,
        logger: Optional[PipelineLogger] = None,
    ) -> 'RestClient':
        """
        Создать клиент, конфиг которого наложен на DEFAULT_CONFIG.

        Example:
            >>> client = RestClient.create(RequestConfig(base_url="https://api.example.com"))
        """
        from ..defaults import DEFAULT_CONFIG
        return cls(DEFAULT_CONFIG.merge(config), transport, logger)

    @property
    def config(self) -> RequestConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def logger(self) -> PipelineLogger:
        return self._logger

    def with_config(self, *configs: Optional[RequestConfig]) -> 'RestClient':
        """
        Новый клиент с дополнительными слоями конфигурации.

        Транспорт и логгер общие с родительским клиентом.
        """
        return RestClient(self._config.merge(*configs), self._transport, self._logger)

    # ==================== Жизненный цикл ====================

    def close(self) -> None:
        """Закрыть транспорт, если клиент его создал сам."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<RestClient base_url={self._config.get('base_url')!r}>"

    # ==================== Пайплайн ====================

    def execute(
        self,
        path: str,
        method: Union[str, RequestMethod],
        body: Any = None,
        response_type: Any = None,
        *configs: Optional[RequestConfig],
    ) -> Exchange:
        """
        Выполнить один обмен и вернуть его результат.

        Args:
            path: Путь относительно base_url (или абсолютный URL)
            method: HTTP метод
            body: Тело запроса (пишется только для POST и PUT)
            response_type: Тип тела ответа (str, int, bytes, PrimitiveBody,
                dataclass, pydantic модель, list[...] ...). None - тело не читается
            *configs: Слои конфигурации вызова (накладываются последними)

        Returns:
            Exchange с outcome COMPLETED, DECLINED или FAILED

        Raises:
            RequestIOError: Ошибка транспорта или трансформера
            ConfigurationError: Эффективная конфигурация неполна
        """
        method = RequestMethod.parse(method)
        config = self._config.merge(method.to_config(), *configs)
        url = build_url(config.get('base_url'), path, config.get('params'))

        with correlation_scope() as request_id:
            start_time = time.monotonic()
            self._logger.info(
                "Exchange started",
                method=config.method.value,
                url=url,
                correlation_id=request_id,
            )

            connection = self._transport.open(url, config.get('proxy'))
            try:
                exchange = self._run(connection, config, url, body, response_type, request_id)
            except Exception as e:
                self._logger.error(
                    "Exchange failed",
                    method=config.method.value,
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                    duration_ms=_elapsed_ms(start_time),
                    correlation_id=request_id,
                )
                raise
            finally:
                connection.disconnect()

            if exchange.completed:
                self._logger.info(
                    "Exchange completed",
                    method=config.method.value,
                    url=url,
                    status_code=exchange.response.status_code,
                    duration_ms=_elapsed_ms(start_time),
                    correlation_id=request_id,
                )
            return exchange

    def _run(
        self,
        connection: Connection,
        config: RequestConfig,
        url: str,
        body: Any,
        response_type: Any,
        request_id: str,
    ) -> Exchange:
        self._apply_config(connection, config)

        verdict = run_request_interceptors(config.request_interceptors, url, connection, config)
        if verdict.aborted:
            self._logger.info(
                "Request declined",
                url=url,
                interceptor=verdict.interceptor,
                reason=verdict.reason,
                correlation_id=request_id,
            )
            return Exchange(
                ExchangeOutcome.DECLINED, url, request_id,
                reason=verdict.reason, declined_by=verdict.interceptor,
            )

        if body is not None and config.is_outputting():
            self._write_body(connection, config, body)

        status_code = connection.status_code
        status_message = connection.status_message
        headers = Headers.from_fields(connection.header_fields)

        if is_error(status_code, config.get('ignore_status')):
            error_body = PrimitiveBody(connection.read_error_body(), connection.content_encoding)
            error_response: HttpResponse[str] = HttpResponse(
                error_body.as_string(), headers, status_code, status_message, config, url
            )
            error = HttpStatusCodeError(error_response)
            self._logger.warning(
                "HTTP status error",
                url=url,
                status_code=status_code,
                status_message=status_message,
                correlation_id=request_id,
            )
            as_error_handler(config.require('error_handler')).on_http_error(error)
            return Exchange(ExchangeOutcome.FAILED, url, request_id, error=error)

        response = HttpResponse(
            self._decode(connection, config, response_type, url),
            headers, status_code, status_message, config, url,
        )

        verdict = run_response_interceptors(config.response_interceptors, response)
        if verdict.aborted:
            self._logger.info(
                "Response declined",
                url=url,
                status_code=status_code,
                interceptor=verdict.interceptor,
                reason=verdict.reason,
                correlation_id=request_id,
            )
            return Exchange(
                ExchangeOutcome.DECLINED, url, request_id, response=response,
                reason=verdict.reason, declined_by=verdict.interceptor,
            )

        return Exchange(ExchangeOutcome.COMPLETED, url, request_id, response=response)

    def _apply_config(self, connection: Connection, config: RequestConfig) -> None:
        """Перенести эффективную конфигурацию на соединение."""
        connection.set_connect_timeout(config.get('connect_timeout'))
        connection.set_read_timeout(config.get('read_timeout'))
        connection.set_request_method(config.require('method'))
        if config.is_outputting():
            connection.set_do_output(True)

        if is_set(config.authenticator):
            connection.set_authenticator(config.authenticator)

        # Supplier-заголовки вычисляются здесь, на каждый запрос заново
        headers = config.get('headers')
        if headers:
            for name, value in headers.resolve().items():
                connection.set_request_property(name, value)

        connection.set_use_caches(config.get('use_caches', False))

        # Последний хук - может переопределить всё выше
        customizer = config.get('connection_customizer')
        if customizer is not None:
            customizer(connection)

    def _write_body(self, connection: Connection, config: RequestConfig, body: Any) -> None:
        transformer = config.require('request_transformer')
        headers = config.get('headers') or Headers()

        content_type = transformer.content_type()
        if content_type and connection.get_request_property("Content-Type") is None:
            connection.set_request_property("Content-Type", content_type)
            headers = headers.with_content_type(content_type)

        connection.write_body(transformer.transform(body, headers))

    def _decode(self, connection: Connection, config: RequestConfig, response_type: Any, url: str) -> Any:
        if config.method is RequestMethod.HEAD or response_type is None:
            return None

        data = connection.read_body()

        # Примитивы декодируются без трансформера
        if is_primitive_type(response_type):
            try:
                return PrimitiveBody(data, connection.content_encoding).as_type(response_type)
            except ValueError as e:
                raise ResponseDecodeError(
                    f"Cannot decode response body: {e}", target_type=response_type, url=url
                ) from e

        return config.require('response_transformer').transform(data, response_type)

    # ==================== Обёртки ====================

    def request(
        self,
        path: str,
        method: Union[str, RequestMethod],
        body: Any = None,
        response_type: Any = None,
        *configs: Optional[RequestConfig],
    ) -> Optional[HttpResponse[Any]]:
        """
        Выполнить запрос.

        Returns:
            HttpResponse или None, если обмен отменён interceptor'ом
            или статус признан ошибкой (тогда вызван error handler)
        """
        return self.execute(path, method, body, response_type, *configs).value

    def request_for_object(
        self,
        path: str,
        method: Union[str, RequestMethod],
        body: Any = None,
        response_type: Any = None,
        *configs: Optional[RequestConfig],
    ) -> Any:
        """То же, что request(), но возвращает только тело."""
        response = self.request(path, method, body, response_type, *configs)
        return response.body if response is not None else None

    def get(self, path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
        """
        Выполняет GET запрос.

        Args:
            path: Путь или полный URL
            response_type: Тип тела ответа
            *configs: Слои конфигурации вызова

        Returns:
            HttpResponse или None
        """
        return self.request(path, RequestMethod.GET, None, response_type, *configs)

    def post(self, path: str, body: Any = None, response_type: Any = None,
             *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
        """
        Выполняет POST запрос.

        Args:
            path: Путь или полный URL
            body: Тело запроса (сериализуется request_transformer'ом)
            response_type: Тип тела ответа
            *configs: Слои конфигурации вызова
        """
        return self.request(path, RequestMethod.POST, body, response_type, *configs)

    def put(self, path: str, body: Any = None, response_type: Any = None,
            *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
        """Выполняет PUT запрос."""
        return self.request(path, RequestMethod.PUT, body, response_type, *configs)

    def delete(self, path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
        """Выполняет DELETE запрос."""
        return self.request(path, RequestMethod.DELETE, None, response_type, *configs)

    def head(self, path: str, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[None]]:
        """Выполняет HEAD запрос. Тело ответа всегда None."""
        return self.request(path, RequestMethod.HEAD, None, None, *configs)

    def get_for_object(self, path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
        return self.request_for_object(path, RequestMethod.GET, None, response_type, *configs)

    def post_for_object(self, path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
        return self.request_for_object(path, RequestMethod.POST, body, response_type, *configs)

    def put_for_object(self, path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
        return self.request_for_object(path, RequestMethod.PUT, body, response_type, *configs)

    def delete_for_object(self, path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
        return self.request_for_object(path, RequestMethod.DELETE, None, response_type, *configs)


def _elapsed_ms(start_time: float) -> float:
    return round((time.monotonic() - start_time) * 1000, 2)
