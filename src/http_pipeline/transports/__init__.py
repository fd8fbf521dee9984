"""Transport adapters."""

from .requests_transport import RequestsTransport, RequestsConnection, ThreadLocalSessions
from .httpx_transport import HttpxTransport, HttpxConnection

__all__ = [
    "RequestsTransport",
    "RequestsConnection",
    "ThreadLocalSessions",
    "HttpxTransport",
    "HttpxConnection",
]
