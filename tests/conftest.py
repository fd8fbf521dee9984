"""
Pytest configuration and fixtures for http-pipeline-core tests.
"""

import threading
from http import HTTPStatus

import pytest
import responses as responses_lib

from http_pipeline.core.config import RequestConfig
from http_pipeline.core.error_handler import CollectingErrorHandler
from http_pipeline.core.logging.config import LoggingConfig
from http_pipeline.core.rest_client import RestClient
from http_pipeline.core.transport import Connection, RawResponse, Transport


class StubConnection(Connection):
    """Connection that answers from StubTransport.responder instead of the network."""

    def __init__(self, transport, url, proxy=None):
        super().__init__(url, proxy)
        self._stub = transport
        self.perform_count = 0
        self.close_count = 0

    def _perform(self):
        self.perform_count += 1
        return self._stub.responder(self)

    def _close(self):
        self.close_count += 1


class StubTransport(Transport):
    """
    In-memory transport.

    Every opened connection is recorded, so tests can inspect what the
    pipeline configured (method, headers, body) and whether it was closed.
    """

    def __init__(self):
        self.responder = lambda connection: RawResponse(200, "OK", {}, b"")
        self.connections = []
        self.closed = False
        self._lock = threading.Lock()

    def reply(self, status_code=200, body=b"", headers=None, reason=None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        if reason is None:
            reason = HTTPStatus(status_code).phrase
        raw = RawResponse(status_code, reason, dict(headers or {}), body, "utf-8")
        self.responder = lambda connection: raw
        return self

    def reply_with(self, responder):
        self.responder = responder
        return self

    def fail_with(self, error):
        def responder(connection):
            raise error
        self.responder = responder
        return self

    def open(self, url, proxy=None):
        connection = StubConnection(self, url, proxy)
        with self._lock:
            self.connections.append(connection)
        return connection

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.connections[-1]


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com/"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def stub_transport():
    """Transport without network; configure with reply()/fail_with()."""
    return StubTransport()


@pytest.fixture
def collected_errors():
    return CollectingErrorHandler()


@pytest.fixture
def client(base_url, stub_transport, collected_errors):
    """RestClient over DEFAULT_CONFIG with stub transport and collecting error handler."""
    config = RequestConfig(base_url=base_url, error_handler=collected_errors)
    return RestClient.create(config, transport=stub_transport)


@pytest.fixture
def logging_config():
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "pipeline.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
