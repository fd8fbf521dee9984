"""Тесты DEFAULT_CONFIG, фабрик и модульных shortcut'ов."""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest
import responses

import http_pipeline
from http_pipeline import defaults
from http_pipeline.async_client import AsyncRestClient
from http_pipeline.core.error_handler import LoggingErrorHandler
from http_pipeline.core.methods import RequestMethod
from http_pipeline.core.rest_client import RestClient
from http_pipeline.core.transformers import JsonRequestTransformer, JsonResponseTransformer
from http_pipeline.transports import RequestsTransport


class TestDefaultConfig:

    def test_values(self):
        config = defaults.DEFAULT_CONFIG
        assert config.base_url == ""
        assert config.connect_timeout == 7.5
        assert config.read_timeout == 7.5
        assert config.use_caches is False
        assert config.method is RequestMethod.GET
        assert config.params.to_url_part() == ""
        assert len(config.headers) == 0
        assert isinstance(config.request_transformer, JsonRequestTransformer)
        assert isinstance(config.response_transformer, JsonResponseTransformer)
        assert isinstance(config.error_handler, LoggingErrorHandler)
        assert config.request_interceptors == ()
        assert config.response_interceptors == ()

    @pytest.mark.parametrize("status", [300, 404, 500])
    def test_never_ignores_status(self, status):
        assert defaults.DEFAULT_CONFIG.ignore_status(status) is False

    def test_customizer_is_noop(self):
        assert defaults.DEFAULT_CONFIG.connection_customizer(object()) is None

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            defaults.DEFAULT_CONFIG.read_timeout = 1

    def test_exported_from_package(self):
        assert http_pipeline.DEFAULT_CONFIG is defaults.DEFAULT_CONFIG


class TestFactories:

    def test_create_sync(self):
        client = defaults.create(http_pipeline.RequestConfig(read_timeout=2))
        try:
            assert isinstance(client, RestClient)
            assert isinstance(client.transport, RequestsTransport)
            assert client.config.read_timeout == 2
            assert client.config.connect_timeout == 7.5
        finally:
            client.close()

    def test_create_async(self):
        client = defaults.create(async_=True)
        assert isinstance(client, AsyncRestClient)
        assert client.executor is defaults.get_default_executor()

    def test_create_async_with_executor(self):
        with ThreadPoolExecutor(1) as executor:
            client = defaults.create_async(executor=executor)
            assert client.executor is executor

    def test_create_default(self):
        assert defaults.create_default().config.method is RequestMethod.GET

    def test_default_executor_is_shared(self):
        executor = defaults.get_default_executor()
        assert executor is defaults.get_default_executor()
        assert isinstance(executor, ThreadPoolExecutor)

    def test_async_client_without_executor_uses_shared_pool(self):
        client = AsyncRestClient(RestClient.create())
        assert client.executor is defaults.get_default_executor()


class TestShortcuts:

    def test_get_for_object(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/ping", body="pong")
        assert http_pipeline.get_for_object("https://api.example.com/ping", str) == "pong"

    def test_post_for_object(self, mock_responses):
        mock_responses.add(responses.POST, "https://api.example.com/items", json={"id": 7}, status=201)

        assert http_pipeline.post_for_object("https://api.example.com/items", {"name": "a"}, dict) == {"id": 7}
        assert mock_responses.calls[0].request.method == "POST"

    def test_get_for_object_async(self, mock_responses):
        mock_responses.add(responses.GET, "https://api.example.com/ping", body="pong")
        future = http_pipeline.get_for_object_async("https://api.example.com/ping", str)
        assert future.result(timeout=10) == "pong"

    def test_head(self, mock_responses):
        mock_responses.add(responses.HEAD, "https://api.example.com/ping", headers={"X-Up": "1"})
        response = http_pipeline.head("https://api.example.com/ping")
        assert response.body is None
        assert response.headers.get_safe_value("x-up") == "1"
