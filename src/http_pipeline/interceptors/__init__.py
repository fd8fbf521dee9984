"""Request and response interceptors."""

from .base import (
    InterceptorResult,
    PROCEED,
    RequestInterceptor,
    ResponseInterceptor,
    run_request_interceptors,
    run_response_interceptors,
)
from .auth import AuthInterceptor

__all__ = [
    "InterceptorResult",
    "PROCEED",
    "RequestInterceptor",
    "ResponseInterceptor",
    "run_request_interceptors",
    "run_response_interceptors",
    "AuthInterceptor",
]
