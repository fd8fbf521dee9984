# src/http_pipeline/interceptors/auth.py

from typing import Callable, Optional, Union, TYPE_CHECKING

from .base import InterceptorResult, RequestInterceptor

if TYPE_CHECKING:
    from ..core.config import RequestConfig
    from ..core.transport import Connection

TokenSource = Union[str, Callable[[], Optional[str]]]


class AuthInterceptor(RequestInterceptor):
    """Request interceptor для различных типов аутентификации."""

    def __init__(self, auth_type: str = "bearer", token: Optional[TokenSource] = None,
                 username: Optional[str] = None, password: Optional[str] = None,
                 header_name: str = "X-API-Key", url_prefix: Optional[str] = None,
                 require_token: bool = False):
        """
        Args:
            auth_type: Тип аутентификации ('bearer', 'basic', 'api_key')
            token: Токен или функция, возвращающая актуальный токен
            username: Имя пользователя для Basic аутентификации
            password: Пароль для Basic аутентификации
            header_name: Заголовок для 'api_key'
            url_prefix: Добавлять учётные данные только к URL с этим префиксом
            require_token: Отменить запрос, если токена нет
        """
        self.auth_type = auth_type.lower()
        if self.auth_type not in ('bearer', 'basic', 'api_key'):
            raise ValueError(f"Unsupported auth_type: {auth_type}")
        self.token = token
        self.username = username
        self.password = password
        self.header_name = header_name
        self.url_prefix = url_prefix
        self.require_token = require_token

    def _current_token(self) -> Optional[str]:
        if callable(self.token):
            return self.token()
        return self.token

    def before_request(self, url: str, connection: 'Connection', config: 'RequestConfig') -> InterceptorResult:
        """Добавляет заголовки аутентификации."""
        if self.url_prefix and not url.startswith(self.url_prefix):
            return InterceptorResult.proceed()

        if self.auth_type == 'basic':
            if self.username and self.password:
                # requests и httpx принимают (user, password) как auth
                connection.set_authenticator((self.username, self.password))
            elif self.require_token:
                return InterceptorResult.abort("basic credentials are not configured")
            return InterceptorResult.proceed()

        token = self._current_token()
        if not token:
            if self.require_token:
                return InterceptorResult.abort(f"no {self.auth_type} token available")
            return InterceptorResult.proceed()

        if self.auth_type == 'bearer':
            connection.set_request_property("Authorization", f"Bearer {token}")
        else:
            connection.set_request_property(self.header_name, token)
        return InterceptorResult.proceed()

    def update_token(self, token: TokenSource):
        """Обновляет токен аутентификации"""
        self.token = token
