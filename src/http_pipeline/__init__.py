"""HTTP Pipeline - layered request configuration, interceptors and sync/async execution."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core import (
    RequestConfig,
    UNSET,
    merge_configs,
    Header,
    Headers,
    RequestParams,
    RequestMethod,
    HttpResponse,
    PrimitiveBody,
    RequestTransformer,
    ResponseTransformer,
    JsonRequestTransformer,
    JsonResponseTransformer,
    Transport,
    Connection,
    ErrorHandler,
    LoggingErrorHandler,
    RaisingErrorHandler,
    CollectingErrorHandler,
    CallbackErrorHandler,
    Exchange,
    ExchangeOutcome,
    RestClient,
    is_error,
)
from .core.exceptions import (
    HTTPClientException,
    ConfigurationError,
    RequestIOError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    RequestEncodeError,
    ResponseDecodeError,
    HttpStatusCodeError,
    NotFoundError,
    ServerError,
)
from .core.env_config import load_from_env
from .core.logging import LoggingConfig, configure_logging
from .interceptors import InterceptorResult, RequestInterceptor, ResponseInterceptor, AuthInterceptor
from .transports import RequestsTransport, HttpxTransport
from .async_client import AsyncRestClient
from .defaults import (
    DEFAULT_CONFIG,
    create,
    create_default,
    create_async,
    get_default_executor,
    request,
    request_for_object,
    get,
    post,
    put,
    delete,
    head,
    get_for_object,
    post_for_object,
    put_for_object,
    delete_for_object,
    request_async,
    request_for_object_async,
    get_async,
    post_async,
    put_async,
    delete_async,
    head_async,
    get_for_object_async,
    post_for_object_async,
    put_for_object_async,
    delete_for_object_async,
)

# Library logger: silent until the application configures logging
logging.getLogger('http_pipeline').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("http-pipeline-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Clients
    "RestClient",
    "AsyncRestClient",
    "DEFAULT_CONFIG",
    "create",
    "create_default",
    "create_async",
    "get_default_executor",
    # Config
    "RequestConfig",
    "UNSET",
    "merge_configs",
    "Header",
    "Headers",
    "RequestParams",
    "RequestMethod",
    "load_from_env",
    # Response
    "HttpResponse",
    "PrimitiveBody",
    "Exchange",
    "ExchangeOutcome",
    "is_error",
    # Extension points
    "RequestTransformer",
    "ResponseTransformer",
    "JsonRequestTransformer",
    "JsonResponseTransformer",
    "Transport",
    "Connection",
    "RequestsTransport",
    "HttpxTransport",
    "InterceptorResult",
    "RequestInterceptor",
    "ResponseInterceptor",
    "AuthInterceptor",
    "ErrorHandler",
    "LoggingErrorHandler",
    "RaisingErrorHandler",
    "CollectingErrorHandler",
    "CallbackErrorHandler",
    # Logging
    "LoggingConfig",
    "configure_logging",
    # Exceptions
    "HTTPClientException",
    "ConfigurationError",
    "RequestIOError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "RequestEncodeError",
    "ResponseDecodeError",
    "HttpStatusCodeError",
    "NotFoundError",
    "ServerError",
    # Shortcuts
    "request",
    "request_for_object",
    "get",
    "post",
    "put",
    "delete",
    "head",
    "get_for_object",
    "post_for_object",
    "put_for_object",
    "delete_for_object",
    "request_async",
    "request_for_object_async",
    "get_async",
    "post_async",
    "put_async",
    "delete_async",
    "head_async",
    "get_for_object_async",
    "post_for_object_async",
    "put_for_object_async",
    "delete_for_object_async",
]
