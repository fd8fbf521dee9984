"""Тесты классификатора статусов, PrimitiveBody и исключений."""

import pytest

from http_pipeline.core.classifier import LAST_SUCCESSFUL_STATUS, is_error
from http_pipeline.core.config import RequestConfig
from http_pipeline.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    HttpStatusCodeError,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
    TimeoutError,
    ProxyError,
    UnauthorizedError,
    status_error_for,
)
from http_pipeline.core.headers import Headers
from http_pipeline.core.response import HttpResponse, PrimitiveBody, is_primitive_type

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Классификатор
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _never(status):
    return False


def _always(status):
    return True


@pytest.mark.parametrize("status,ignore,expected", [
    (200, _never, False),
    (299, _never, False),
    (300, _never, True),
    (404, _never, True),
    (404, lambda s: s == 404, False),
    (500, lambda s: s == 404, True),
    (503, _always, False),
    (204, _always, False),
    (100, _never, False),
])
def test_is_error(status, ignore, expected):
    assert is_error(status, ignore) is expected


def test_success_never_consults_predicate():
    def explode(status):
        raise AssertionError("predicate must not be called for 2xx")

    assert is_error(201, explode) is False


def test_missing_predicate_means_error():
    assert is_error(LAST_SUCCESSFUL_STATUS + 1) is True

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# PrimitiveBody
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestPrimitiveBody:

    def test_as_string_keeps_line_breaks(self):
        body = PrimitiveBody(b"line1\r\nline2\n")
        assert body.as_string() == "line1\r\nline2\n"
        assert body.as_string(include_line_breaks=False) == "line1line2"

    def test_numbers_ignore_surrounding_whitespace(self):
        assert PrimitiveBody(b" 42\n").as_int() == 42
        assert PrimitiveBody(b"3.5").as_float() == 3.5

    @pytest.mark.parametrize("raw,expected", [
        (b"true", True),
        (b"TRUE\n", True),
        (b"false", False),
        (b"yes", False),
        (b"", False),
    ])
    def test_as_bool(self, raw, expected):
        assert PrimitiveBody(raw).as_bool() is expected

    def test_invalid_int(self):
        with pytest.raises(ValueError):
            PrimitiveBody(b"abc").as_int()

    def test_encoding(self):
        assert PrimitiveBody("é".encode("latin-1"), "latin-1").as_string() == "é"

    def test_as_type_dispatch(self):
        body = PrimitiveBody(b"7")
        assert body.as_type(int) == 7
        assert body.as_type(str) == "7"
        assert body.as_type(bytes) == b"7"
        assert body.as_type(float) == 7.0
        assert body.as_type(PrimitiveBody) is body

    def test_as_type_rejects_non_primitive(self):
        with pytest.raises(TypeError):
            PrimitiveBody(b"{}").as_type(dict)

    def test_none_raw_is_empty(self):
        body = PrimitiveBody(None)
        assert body.as_bytes() == b""
        assert len(body) == 0

    def test_is_primitive_type(self):
        assert is_primitive_type(str)
        assert is_primitive_type(PrimitiveBody)
        assert not is_primitive_type(dict)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HttpResponse и исключения
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _error_response(status, message="", body="oops"):
    return HttpResponse(body, Headers(), status, message, RequestConfig(), "https://api.example.com/x")


def test_http_response_set_body():
    response = _error_response(200, "OK", body="a")
    response.set_body("b")
    assert response.body == "b"
    assert response.ok


def test_status_error_message_is_status_message():
    error = HttpStatusCodeError(_error_response(404, "Not Found"))
    assert str(error) == "Not Found"
    assert error.status_code == 404
    assert error.body == "oops"
    assert error.url == "https://api.example.com/x"


def test_status_error_without_message():
    assert str(HttpStatusCodeError(_error_response(418))) == "HTTP 418"


@pytest.mark.parametrize("status,error_class", [
    (400, BadRequestError),
    (401, UnauthorizedError),
    (403, ForbiddenError),
    (404, NotFoundError),
    (500, ServerError),
    (503, ServerError),
    (409, HttpStatusCodeError),
])
def test_status_error_for(status, error_class):
    assert type(status_error_for(_error_response(status))) is error_class


def test_io_error_messages():
    assert "(read timeout)" in str(TimeoutError("Request timeout", "https://x", timeout_type="read"))
    assert "(proxy: http://p:1)" in str(ProxyError("Proxy error", "https://x", proxy="http://p:1"))
    assert "(target: int)" in str(ResponseDecodeError("bad", target_type=int))
