# src/http_pipeline/async_client.py
"""
Асинхронная обёртка над RestClient.

Каждый вызов выполняет тот же пайплайн, что и RestClient, но в пуле
потоков, и возвращает concurrent.futures.Future. Исключения пайплайна
(RequestIOError, исключения error handler'а) попадают в Future.

Для asyncio кода есть корутины aexecute/arequest/arequest_for_object.
"""

import asyncio
from concurrent.futures import Executor, Future
from typing import Any, Optional, Union

from .core.config import RequestConfig
from .core.exchange import Exchange
from .core.methods import RequestMethod
from .core.response import HttpResponse
from .core.rest_client import RestClient
from .core.transport import Transport


class AsyncRestClient:
    """
    Неблокирующий клиент: RestClient + пул потоков.

    Example:
        >>> client = AsyncRestClient.create(RequestConfig(base_url="https://api.example.com"))
        >>> future = client.get_for_object("/users/1", User)
        >>> user = future.result(timeout=10)

        >>> # asyncio
        >>> response = await client.arequest("/users/1", RequestMethod.GET, None, User)
    """

    def __init__(self, backing: RestClient, executor: Optional[Executor] = None):
        """
        Args:
            backing: Синхронный клиент, который выполняет обмен
            executor: Пул потоков (по умолчанию общий пул на 5 воркеров)
        """
        if executor is None:
            # Lazy import to avoid circular dependency
            from .defaults import get_default_executor
            executor = get_default_executor()
        self._backing = backing
        self._executor = executor

    @classmethod
    def create(
        cls,
        config: Optional[RequestConfig] = None,
        executor: Optional[Executor] = None,
        transport: Optional[Transport] = None,
    ) -> 'AsyncRestClient':
        """Создать клиент, конфиг которого наложен на DEFAULT_CONFIG."""
        return cls(RestClient.create(config, transport), executor)

    @property
    def backing(self) -> RestClient:
        return self._backing

    @property
    def config(self) -> RequestConfig:
        return self._backing.config

    @property
    def executor(self) -> Executor:
        return self._executor

    def with_config(self, *configs: Optional[RequestConfig]) -> 'AsyncRestClient':
        return AsyncRestClient(self._backing.with_config(*configs), self._executor)

    def close(self) -> None:
        """Закрыть транспорт клиента. Пул потоков не останавливается - он может быть общим."""
        self._backing.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _submit(self, fn, *args: Any) -> Future:
        return self._executor.submit(fn, *args)

    # ==================== Future API ====================

    def execute(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                response_type: Any = None, *configs: Optional[RequestConfig]) -> 'Future[Exchange]':
        return self._submit(self._backing.execute, path, method, body, response_type, *configs)

    def request(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                response_type: Any = None, *configs: Optional[RequestConfig]) -> 'Future[Optional[HttpResponse[Any]]]':
        return self._submit(self._backing.request, path, method, body, response_type, *configs)

    def request_for_object(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                           response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
        return self._submit(self._backing.request_for_object, path, method, body, response_type, *configs)

    def get(self, path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
        return self.request(path, RequestMethod.GET, None, response_type, *configs)

    def post(self, path: str, body: Any = None, response_type: Any = None,
             *configs: Optional[RequestConfig]) -> Future:
        return self.request(path, RequestMethod.POST, body, response_type, *configs)

    def put(self, path: str, body: Any = None, response_type: Any = None,
            *configs: Optional[RequestConfig]) -> Future:
        return self.request(path, RequestMethod.PUT, body, response_type, *configs)

    def delete(self, path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
        return self.request(path, RequestMethod.DELETE, None, response_type, *configs)

    def head(self, path: str, *configs: Optional[RequestConfig]) -> Future:
        return self.request(path, RequestMethod.HEAD, None, None, *configs)

    def get_for_object(self, path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
        return self.request_for_object(path, RequestMethod.GET, None, response_type, *configs)

    def post_for_object(self, path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
        return self.request_for_object(path, RequestMethod.POST, body, response_type, *configs)

    def put_for_object(self, path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
        return self.request_for_object(path, RequestMethod.PUT, body, response_type, *configs)

    def delete_for_object(self, path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
        return self.request_for_object(path, RequestMethod.DELETE, None, response_type, *configs)

    # ==================== asyncio API ====================

    async def aexecute(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                       response_type: Any = None, *configs: Optional[RequestConfig]) -> Exchange:
        return await asyncio.wrap_future(self.execute(path, method, body, response_type, *configs))

    async def arequest(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                       response_type: Any = None, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
        """
        Выполнить запрос в пуле и дождаться результата в event loop.

        Example:
            >>> response = await client.arequest("/users", RequestMethod.POST, new_user, User)
        """
        return await asyncio.wrap_future(self.request(path, method, body, response_type, *configs))

    async def arequest_for_object(self, path: str, method: Union[str, RequestMethod], body: Any = None,
                                  response_type: Any = None, *configs: Optional[RequestConfig]) -> Any:
        return await asyncio.wrap_future(
            self.request_for_object(path, method, body, response_type, *configs)
        )
