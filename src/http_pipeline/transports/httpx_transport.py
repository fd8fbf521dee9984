# src/http_pipeline/transports/httpx_transport.py
"""
Транспорт на httpx.Client.

httpx.Client потокобезопасен, но прокси задаётся при создании клиента,
поэтому держим по одному клиенту на каждый прокси.
"""

import threading
from typing import Any, Dict, Optional

import httpx

from ..core.exceptions import classify_httpx_exception
from ..core.transport import Connection, RawResponse, Transport


class HttpxTransport(Transport):
    """
    Transport на httpx.

    Args:
        verify: Проверять TLS сертификаты
        follow_redirects: Следовать редиректам
        client_kwargs: Дополнительные аргументы httpx.Client

    Example:
        >>> client = RestClient.create(config, transport=HttpxTransport())
    """

    def __init__(
        self,
        verify: Any = True,
        follow_redirects: bool = True,
        client_kwargs: Optional[Dict[str, Any]] = None,
    ):
        self.verify = verify
        self.follow_redirects = follow_redirects
        self._client_kwargs = dict(client_kwargs or {})
        self._clients: Dict[Optional[str], httpx.Client] = {}
        self._lock = threading.Lock()

    def client_for(self, proxy: Optional[str] = None) -> httpx.Client:
        with self._lock:
            client = self._clients.get(proxy)
            if client is None:
                kwargs = dict(self._client_kwargs)
                if proxy:
                    kwargs['proxy'] = proxy
                client = httpx.Client(verify=self.verify, **kwargs)
                self._clients[proxy] = client
            return client

    def open(self, url: str, proxy: Optional[str] = None) -> 'HttpxConnection':
        return HttpxConnection(self, url, proxy)

    def close(self) -> None:
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()


class HttpxConnection(Connection):
    """Connection, выполняющий запрос через httpx.Client.request()."""

    def __init__(self, transport: HttpxTransport, url: str, proxy: Optional[str] = None):
        super().__init__(url, proxy)
        self._transport = transport

    def _perform(self) -> RawResponse:
        client = self._transport.client_for(self.proxy)
        timeout = httpx.Timeout(None, connect=self.connect_timeout, read=self.read_timeout)
        kwargs: Dict[str, Any] = {}
        if self.authenticator is not None:
            kwargs['auth'] = self.authenticator

        try:
            response = client.request(
                self.method.value,
                self.url,
                content=self.body,
                headers=self.request_properties,
                timeout=timeout,
                follow_redirects=self._transport.follow_redirects,
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise classify_httpx_exception(e, self.url, self.proxy) from e

        return RawResponse(
            status_code=response.status_code,
            reason=response.reason_phrase or "",
            headers=dict(response.headers),
            content=response.content,
            encoding=response.encoding,
        )
