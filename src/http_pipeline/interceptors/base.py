"""Interceptor contracts and chain runners."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.config import RequestConfig
    from ..core.response import HttpResponse
    from ..core.transport import Connection


@dataclass(frozen=True)
class InterceptorResult:
    """Decision returned by an interceptor.

    Attributes:
        aborted: Stop the exchange
        reason: Why the exchange was aborted
        interceptor: Name of the aborting interceptor (filled by the chain runner)

    Example:
        >>> InterceptorResult.proceed()
        >>> InterceptorResult.abort("blocked host")
    """

    aborted: bool = False
    reason: Optional[str] = None
    interceptor: Optional[str] = None

    @classmethod
    def proceed(cls) -> 'InterceptorResult':
        return PROCEED

    @classmethod
    def abort(cls, reason: str = "declined by interceptor") -> 'InterceptorResult':
        return cls(aborted=True, reason=reason)

    @classmethod
    def coerce(cls, value: Any) -> 'InterceptorResult':
        """Normalize an interceptor return value.

        ``None`` and ``True`` continue, ``False`` aborts with a generic reason.
        """
        if isinstance(value, InterceptorResult):
            return value
        if value is None or value is True:
            return PROCEED
        if value is False:
            return cls.abort()
        raise TypeError(
            f"Interceptor must return InterceptorResult or bool, got {type(value).__name__}"
        )


PROCEED = InterceptorResult()

InterceptorReturn = Union[InterceptorResult, bool, None]


class RequestInterceptor(ABC):
    """Hook invoked after the connection is configured and before the body is written.

    May mutate the connection (headers, timeouts) and may abort the exchange.
    Changes to ``config`` are not re-applied to the connection.

    Example:
        class BlockHosts(RequestInterceptor):
            def __init__(self, hosts):
                self.hosts = hosts

            def before_request(self, url, connection, config):
                if any(host in url for host in self.hosts):
                    return InterceptorResult.abort(f"host blocked: {url}")
                return InterceptorResult.proceed()
    """

    @abstractmethod
    def before_request(self, url: str, connection: 'Connection', config: 'RequestConfig') -> InterceptorReturn:
        pass

    def __call__(self, url: str, connection: 'Connection', config: 'RequestConfig') -> InterceptorReturn:
        return self.before_request(url, connection, config)


class ResponseInterceptor(ABC):
    """Hook invoked with the decoded response before it is returned.

    May replace the body via ``response.set_body`` and may abort the exchange.
    """

    @abstractmethod
    def before_response(self, response: 'HttpResponse[Any]') -> InterceptorReturn:
        pass

    def __call__(self, response: 'HttpResponse[Any]') -> InterceptorReturn:
        return self.before_response(response)


RequestHook = Union[RequestInterceptor, Callable[[str, 'Connection', 'RequestConfig'], InterceptorReturn]]
ResponseHook = Union[ResponseInterceptor, Callable[['HttpResponse[Any]'], InterceptorReturn]]


def _name(interceptor: Any) -> str:
    return getattr(interceptor, '__name__', None) or interceptor.__class__.__name__


def run_request_interceptors(
    interceptors: Iterable[RequestHook],
    url: str,
    connection: 'Connection',
    config: 'RequestConfig',
) -> InterceptorResult:
    """Run request interceptors in order, stopping at the first abort."""
    for interceptor in interceptors:
        result = InterceptorResult.coerce(interceptor(url, connection, config))
        if result.aborted:
            return InterceptorResult(True, result.reason, _name(interceptor))
    return PROCEED


def run_response_interceptors(
    interceptors: Iterable[ResponseHook],
    response: 'HttpResponse[Any]',
) -> InterceptorResult:
    """Run response interceptors in order, stopping at the first abort."""
    for interceptor in interceptors:
        result = InterceptorResult.coerce(interceptor(response))
        if result.aborted:
            return InterceptorResult(True, result.reason, _name(interceptor))
    return PROCEED
