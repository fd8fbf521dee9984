"""Core modules of HTTP Pipeline."""

from .config import RequestConfig, UNSET, is_set, merge_configs
from .headers import Header, Headers
from .params import RequestParams
from .methods import RequestMethod
from .classifier import LAST_SUCCESSFUL_STATUS, is_error
from .response import HttpResponse, PrimitiveBody, PRIMITIVE_TYPES
from .transformers import (
    RequestTransformer,
    ResponseTransformer,
    JsonRequestTransformer,
    JsonResponseTransformer,
)
from .transport import Transport, Connection, RawResponse
from .error_handler import (
    ErrorHandler,
    LoggingErrorHandler,
    RaisingErrorHandler,
    CollectingErrorHandler,
    CallbackErrorHandler,
)
from .exchange import Exchange, ExchangeOutcome
from .rest_client import RestClient, build_url
from .exceptions import (
    HTTPClientException,
    ConfigurationError,
    RequestIOError,
    TransportError,
    NetworkError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    TransformError,
    RequestEncodeError,
    ResponseDecodeError,
    HttpStatusCodeError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    status_error_for,
)

__all__ = [
    # Config
    "RequestConfig",
    "UNSET",
    "is_set",
    "merge_configs",
    "Header",
    "Headers",
    "RequestParams",
    "RequestMethod",
    # Classifier
    "LAST_SUCCESSFUL_STATUS",
    "is_error",
    # Response
    "HttpResponse",
    "PrimitiveBody",
    "PRIMITIVE_TYPES",
    # Transformers
    "RequestTransformer",
    "ResponseTransformer",
    "JsonRequestTransformer",
    "JsonResponseTransformer",
    # Transport
    "Transport",
    "Connection",
    "RawResponse",
    # Error handlers
    "ErrorHandler",
    "LoggingErrorHandler",
    "RaisingErrorHandler",
    "CollectingErrorHandler",
    "CallbackErrorHandler",
    # Executor
    "Exchange",
    "ExchangeOutcome",
    "RestClient",
    "build_url",
    # Exceptions
    "HTTPClientException",
    "ConfigurationError",
    "RequestIOError",
    "TransportError",
    "NetworkError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "TransformError",
    "RequestEncodeError",
    "ResponseDecodeError",
    "HttpStatusCodeError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "status_error_for",
]
