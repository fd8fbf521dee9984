# src/http_pipeline/transports/requests_transport.py
"""
Транспорт на requests (используется по умолчанию).

requests.Session не потокобезопасен, поэтому каждый поток получает
свою сессию - пайплайн вызывается из пула воркеров AsyncRestClient.
"""

import threading
import weakref
from typing import Callable, Optional, Set

import requests
from requests.adapters import HTTPAdapter

from ..core.exceptions import classify_requests_exception
from ..core.transport import Connection, RawResponse, Transport


def _declared_charset(headers) -> Optional[str]:
    """Charset из Content-Type или None, если сервер его не указал."""
    content_type = headers.get("content-type", "")
    if "charset" not in content_type.lower():
        return None
    return requests.utils.get_encoding_from_headers(headers)


class ThreadLocalSessions:
    """
    Thread-local requests.Session instances.

    Sessions are created lazily on first access per thread and tracked
    through weak references so close_all() can reach all of them.
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.Lock()

    def get_session(self) -> requests.Session:
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._forget))
        return session

    def _forget(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_all(self) -> None:
        """Close sessions of all threads. Safe to call multiple times."""
        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()
        self._local = threading.local()

    def active_count(self) -> int:
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)


class RequestsTransport(Transport):
    """
    Transport на requests.Session.

    Args:
        session_factory: Фабрика сессий (по умолчанию requests.Session без ретраев)
        verify: Проверять TLS сертификаты (bool или путь к CA bundle)
        allow_redirects: Следовать редиректам

    Example:
        >>> transport = RequestsTransport(verify="/etc/ssl/corp-ca.pem")
        >>> client = RestClient.create(config, transport=transport)
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        verify=True,
        allow_redirects: bool = True,
    ):
        self.verify = verify
        self.allow_redirects = allow_redirects
        self._sessions = ThreadLocalSessions(session_factory or self._create_session)

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        # Ровно одна попытка на обмен
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        return session

    @property
    def session(self) -> requests.Session:
        """Сессия текущего потока."""
        return self._sessions.get_session()

    def open(self, url: str, proxy: Optional[str] = None) -> 'RequestsConnection':
        return RequestsConnection(self, url, proxy)

    def close(self) -> None:
        self._sessions.close_all()


class RequestsConnection(Connection):
    """Connection, выполняющий запрос через session.request()."""

    def __init__(self, transport: RequestsTransport, url: str, proxy: Optional[str] = None):
        super().__init__(url, proxy)
        self._transport = transport
        self._response_obj: Optional[requests.Response] = None

    def _perform(self) -> RawResponse:
        proxies = {'http': self.proxy, 'https': self.proxy} if self.proxy else None
        try:
            response = self._transport.session.request(
                method=self.method.value,
                url=self.url,
                data=self.body,
                headers=self.request_properties,
                timeout=(self.connect_timeout, self.read_timeout),
                proxies=proxies,
                auth=self.authenticator,
                verify=self._transport.verify,
                allow_redirects=self._transport.allow_redirects,
            )
            content = response.content
        except requests.exceptions.RequestException as e:
            raise classify_requests_exception(e, self.url, self.proxy) from e

        self._response_obj = response
        return RawResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            headers=dict(response.headers),
            content=content,
            encoding=_declared_charset(response.headers),
        )

    def _close(self) -> None:
        if self._response_obj is not None:
            self._response_obj.close()
