# src/http_pipeline/defaults.py
"""
Process-wide defaults and module-level shortcuts.

DEFAULT_CONFIG is the bottom layer of every client created through
RestClient.create(). It is built once at import and never changes;
customize behaviour by merging layers on top of it.

Example:
    >>> import http_pipeline
    >>> user = http_pipeline.get_for_object("https://api.example.com/users/1", User)
    >>> future = http_pipeline.get_for_object_async("https://api.example.com/users/2", User)
"""

import atexit
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional, Union

from .async_client import AsyncRestClient
from .core.config import RequestConfig
from .core.error_handler import LoggingErrorHandler
from .core.headers import Headers
from .core.methods import RequestMethod
from .core.params import RequestParams
from .core.response import HttpResponse
from .core.rest_client import RestClient
from .core.transformers import JsonRequestTransformer, JsonResponseTransformer

DEFAULT_TIMEOUT = 7.5  # seconds, connect and read
DEFAULT_ASYNC_WORKERS = 5


def _never_ignore(status_code: int) -> bool:
    return False


def _no_customization(connection) -> None:
    pass


DEFAULT_CONFIG = RequestConfig(
    base_url="",
    params=RequestParams(),
    connect_timeout=DEFAULT_TIMEOUT,
    read_timeout=DEFAULT_TIMEOUT,
    headers=Headers(),
    method=RequestMethod.GET,
    use_caches=False,
    request_transformer=JsonRequestTransformer(),
    response_transformer=JsonResponseTransformer(),
    ignore_status=_never_ignore,
    error_handler=LoggingErrorHandler(),
    connection_customizer=_no_customization,
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DEFAULT EXECUTOR / CLIENTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

_lock = threading.Lock()
_default_executor: Optional[ThreadPoolExecutor] = None
_default_client: Optional[RestClient] = None
_async_client: Optional[AsyncRestClient] = None


def get_default_executor() -> ThreadPoolExecutor:
    """
    Shared worker pool for async clients.

    Created on first use; size comes from HTTP_PIPELINE_ASYNC_WORKERS
    (default 5). Shut down at interpreter exit.
    """
    global _default_executor

    with _lock:
        if _default_executor is None:
            from .core.env_config import load_async_workers
            _default_executor = ThreadPoolExecutor(
                max_workers=load_async_workers(),
                thread_name_prefix="http-pipeline",
            )
            atexit.register(_shutdown_default_executor)
        return _default_executor


def _shutdown_default_executor() -> None:
    global _default_executor

    with _lock:
        executor, _default_executor = _default_executor, None
    if executor is not None:
        executor.shutdown(wait=False)


def default_client() -> RestClient:
    """RestClient over DEFAULT_CONFIG used by the module-level shortcuts."""
    global _default_client

    with _lock:
        if _default_client is None:
            _default_client = RestClient.create()
        return _default_client


def default_async_client() -> AsyncRestClient:
    global _async_client

    backing = default_client()
    executor = get_default_executor()
    with _lock:
        if _async_client is None:
            _async_client = AsyncRestClient(backing, executor)
        return _async_client


def create(config: Optional[RequestConfig] = None, async_: bool = False) -> Union[RestClient, AsyncRestClient]:
    """
    Create a client over DEFAULT_CONFIG ⊕ config.

    Args:
        config: Client layer
        async_: Return AsyncRestClient on the shared executor
    """
    backing = RestClient.create(config)
    if async_:
        return AsyncRestClient(backing, get_default_executor())
    return backing


def create_default(config: Optional[RequestConfig] = None) -> RestClient:
    return RestClient.create(config)


def create_async(config: Optional[RequestConfig] = None, executor: Optional[ThreadPoolExecutor] = None) -> AsyncRestClient:
    return AsyncRestClient(RestClient.create(config), executor or get_default_executor())

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SHORTCUTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def request(path: str, method: Union[str, RequestMethod], body: Any = None, response_type: Any = None,
            *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
    return default_client().request(path, method, body, response_type, *configs)


def request_for_object(path: str, method: Union[str, RequestMethod], body: Any = None, response_type: Any = None,
                       *configs: Optional[RequestConfig]) -> Any:
    return default_client().request_for_object(path, method, body, response_type, *configs)


def get(path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
    return default_client().get(path, response_type, *configs)


def post(path: str, body: Any = None, response_type: Any = None,
         *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
    return default_client().post(path, body, response_type, *configs)


def put(path: str, body: Any = None, response_type: Any = None,
        *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
    return default_client().put(path, body, response_type, *configs)


def delete(path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[Any]]:
    return default_client().delete(path, response_type, *configs)


def head(path: str, *configs: Optional[RequestConfig]) -> Optional[HttpResponse[None]]:
    return default_client().head(path, *configs)


def get_for_object(path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
    return default_client().get_for_object(path, response_type, *configs)


def post_for_object(path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
    return default_client().post_for_object(path, body, response_type, *configs)


def put_for_object(path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
    return default_client().put_for_object(path, body, response_type, *configs)


def delete_for_object(path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Any:
    return default_client().delete_for_object(path, response_type, *configs)


def request_async(path: str, method: Union[str, RequestMethod], body: Any = None, response_type: Any = None,
                  *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().request(path, method, body, response_type, *configs)


def request_for_object_async(path: str, method: Union[str, RequestMethod], body: Any = None,
                             response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().request_for_object(path, method, body, response_type, *configs)


def get_async(path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().get(path, response_type, *configs)


def post_async(path: str, body: Any = None, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().post(path, body, response_type, *configs)


def put_async(path: str, body: Any = None, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().put(path, body, response_type, *configs)


def delete_async(path: str, response_type: Any = None, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().delete(path, response_type, *configs)


def head_async(path: str, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().head(path, *configs)


def get_for_object_async(path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().get_for_object(path, response_type, *configs)


def post_for_object_async(path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().post_for_object(path, body, response_type, *configs)


def put_for_object_async(path: str, body: Any, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().put_for_object(path, body, response_type, *configs)


def delete_for_object_async(path: str, response_type: Any, *configs: Optional[RequestConfig]) -> Future:
    return default_async_client().delete_for_object(path, response_type, *configs)
