"""Тесты для слоёв конфигурации и правил их наложения."""

import dataclasses

import pytest

from http_pipeline.core.config import RequestConfig, UNSET, is_set, merge_configs
from http_pipeline.core.exceptions import ConfigurationError
from http_pipeline.core.headers import Headers
from http_pipeline.core.methods import RequestMethod
from http_pipeline.core.params import RequestParams


def _interceptor(name):
    def interceptor(url, connection, config):
        return None
    interceptor.__name__ = name
    return interceptor

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# UNSET и построение
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def test_empty_config_has_unset_scalars():
    """Новый слой ничего не задаёт."""
    config = RequestConfig()
    assert config.base_url is UNSET
    assert config.read_timeout is UNSET
    assert config.headers is UNSET
    assert config.request_interceptors == ()
    assert config.set_fields() == {}

def test_unset_is_falsy_singleton():
    assert not UNSET
    assert repr(UNSET) == "UNSET"
    assert dataclasses.replace(RequestConfig()).base_url is UNSET
    assert is_set(UNSET) is False
    assert is_set(None) is False
    assert is_set(0) is True

def test_dict_headers_and_params_are_normalized():
    """dict превращается в Headers / RequestParams."""
    config = RequestConfig(headers={"Accept": "text/plain"}, params={"page": 1})
    assert isinstance(config.headers, Headers)
    assert isinstance(config.params, RequestParams)
    assert config.headers.get_safe_value("accept") == "text/plain"

def test_method_string_is_parsed():
    assert RequestConfig(method="post").method is RequestMethod.POST

def test_interceptor_list_becomes_tuple():
    first = _interceptor("first")
    config = RequestConfig(request_interceptors=[first])
    assert config.request_interceptors == (first,)

def test_non_positive_timeout_rejected():
    with pytest.raises(ValueError, match="read_timeout must be positive"):
        RequestConfig(read_timeout=0)
    with pytest.raises(ValueError, match="connect_timeout must be positive"):
        RequestConfig(connect_timeout=-1)

def test_non_callable_predicate_rejected():
    with pytest.raises(TypeError, match="ignore_status must be callable"):
        RequestConfig(ignore_status=404)

def test_config_immutable():
    """Тест immutability."""
    config = RequestConfig(base_url="https://a.example.com")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.base_url = "https://b.example.com"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Наложение слоёв
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestMerge:
    """Правила merge."""

    def test_later_scalar_wins(self):
        base = RequestConfig(base_url="https://a.example.com", read_timeout=5)
        result = base.merge(RequestConfig(read_timeout=30))
        assert result.base_url == "https://a.example.com"
        assert result.read_timeout == 30

    def test_unset_does_not_erase(self):
        base = RequestConfig(read_timeout=5, proxy="http://proxy:3128")
        result = base.merge(RequestConfig(base_url="https://x.example.com"))
        assert result.read_timeout == 5
        assert result.proxy == "http://proxy:3128"

    def test_none_does_not_erase(self):
        base = RequestConfig(proxy="http://proxy:3128")
        result = base.merge(RequestConfig(proxy=None))
        assert result.proxy == "http://proxy:3128"

    def test_headers_union_with_override(self):
        base = RequestConfig(headers={"Accept": "application/json", "X-Client": "base"})
        layer = RequestConfig(headers={"x-client": "call", "X-Trace": "t-1"})
        resolved = base.merge(layer).headers.resolve()
        assert resolved["Accept"] == "application/json"
        assert resolved["X-Trace"] == "t-1"
        # Имя из последнего слоя, значение тоже
        assert resolved["x-client"] == "call"
        assert len(resolved) == 3

    def test_headers_only_in_layer(self):
        result = RequestConfig().merge(RequestConfig(headers={"A": "1"}))
        assert result.headers.get_safe_value("a") == "1"

    def test_interceptors_concatenate_in_layer_order(self):
        a, b, c = _interceptor("a"), _interceptor("b"), _interceptor("c")
        result = RequestConfig(request_interceptors=(a,)).merge(
            RequestConfig(request_interceptors=(b,)),
            RequestConfig(request_interceptors=(c,)),
        )
        assert result.request_interceptors == (a, b, c)

    def test_response_interceptors_concatenate(self):
        a, b = _interceptor("a"), _interceptor("b")
        result = RequestConfig(response_interceptors=(a,)).merge(RequestConfig(response_interceptors=(b,)))
        assert result.response_interceptors == (a, b)

    def test_params_replaced_as_a_whole(self):
        base = RequestConfig(params={"a": 1})
        result = base.merge(RequestConfig(params={"b": 2}))
        assert result.params.to_url_part() == "?b=2"

    def test_merge_is_pure(self):
        base = RequestConfig(headers={"A": "1"})
        layer = RequestConfig(headers={"B": "2"})
        base.merge(layer)
        assert list(base.headers) == ["A"]
        assert list(layer.headers) == ["B"]

    def test_merge_skips_none_layers(self):
        base = RequestConfig(read_timeout=5)
        assert base.merge(None, None) is base

    def test_merge_rejects_foreign_objects(self):
        with pytest.raises(TypeError, match="Can only merge RequestConfig"):
            RequestConfig().merge({"read_timeout": 5})

    def test_merge_is_associative(self):
        a = RequestConfig(
            base_url="https://a.example.com",
            headers={"A": "1", "Shared": "a"},
            request_interceptors=(_interceptor("a"),),
        )
        b = RequestConfig(read_timeout=10, headers={"shared": "b"}, method=RequestMethod.PUT)
        c = RequestConfig(
            base_url="https://c.example.com",
            headers={"C": "3"},
            request_interceptors=(_interceptor("c"),),
        )
        assert a.merge(b).merge(c) == a.merge(b.merge(c))
        assert a.merge(b, c) == a.merge(b).merge(c)

    def test_merge_configs_function(self):
        base = RequestConfig(read_timeout=5)
        assert merge_configs(base, RequestConfig(read_timeout=9)).read_timeout == 9

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Доступ и copy-setters
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestAccess:

    def test_require_missing_field(self):
        with pytest.raises(ConfigurationError, match="RequestConfig.method is not set"):
            RequestConfig().require("method")

    def test_require_present_field(self):
        assert RequestConfig(method="GET").require("method") is RequestMethod.GET

    def test_get_with_default(self):
        assert RequestConfig().get("read_timeout", 1.5) == 1.5
        assert RequestConfig(read_timeout=3).get("read_timeout", 1.5) == 3

    @pytest.mark.parametrize("method,outputting", [
        (RequestMethod.GET, False),
        (RequestMethod.POST, True),
        (RequestMethod.PUT, True),
        (RequestMethod.DELETE, False),
        (RequestMethod.PATCH, False),
        (RequestMethod.HEAD, False),
    ])
    def test_is_outputting(self, method, outputting):
        assert RequestConfig(method=method).is_outputting() is outputting

    def test_unset_method_is_not_outputting(self):
        assert RequestConfig().is_outputting() is False

    def test_set_fields_lists_only_provided(self):
        hook = _interceptor("hook")
        config = RequestConfig(read_timeout=3, request_interceptors=(hook,))
        assert config.set_fields() == {"read_timeout": 3, "request_interceptors": (hook,)}


class TestCopySetters:

    def test_with_timeouts(self):
        config = RequestConfig(read_timeout=5)
        updated = config.with_timeouts(connect=2)
        assert updated.connect_timeout == 2
        assert updated.read_timeout == 5
        assert config.connect_timeout is UNSET

    def test_with_headers_merges_within_layer(self):
        config = RequestConfig(headers={"A": "1"}).with_headers({"B": "2"})
        assert config.headers.resolve() == {"A": "1", "B": "2"}

    def test_with_headers_on_empty_layer(self):
        config = RequestConfig().with_headers(Headers({"A": "1"}))
        assert config.headers.resolve() == {"A": "1"}

    def test_with_method_parses(self):
        assert RequestConfig().with_method("delete").method is RequestMethod.DELETE

    def test_add_interceptors(self):
        hook = _interceptor("hook")
        config = RequestConfig().add_request_interceptor(hook).add_response_interceptor(hook)
        assert config.request_interceptors == (hook,)
        assert config.response_interceptors == (hook,)

    def test_with_transformers_keeps_unspecified(self):
        sentinel = object()
        config = RequestConfig(response_transformer=sentinel).with_transformers(request="req")
        assert config.request_transformer == "req"
        assert config.response_transformer is sentinel

    def test_misc_setters(self):
        config = (
            RequestConfig()
            .with_base_url("https://a.example.com")
            .with_proxy("http://proxy:3128")
            .with_use_caches(True)
            .with_params({"q": "x"})
        )
        assert config.base_url == "https://a.example.com"
        assert config.proxy == "http://proxy:3128"
        assert config.use_caches is True
        assert config.params.to_url_part() == "?q=x"

    def test_hook_setters(self):
        def ignore(code):
            return code == 404

        def customize(connection):
            pass

        handler = object()
        base = RequestConfig()
        config = (
            base
            .with_ignore_status(ignore)
            .with_error_handler(handler)
            .with_connection_customizer(customize)
            .with_authenticator(("user", "secret"))
        )
        assert config.ignore_status is ignore
        assert config.error_handler is handler
        assert config.connection_customizer is customize
        assert config.authenticator == ("user", "secret")
        assert base.set_fields() == {}
