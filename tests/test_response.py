import json

import pytest
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request

from thunderstt.response import (
    bytes_response,
    error_response,
    error_response_for_request,
    error_response_with_code,
    error_type_for_status,
    get_request_id,
    json_response,
    set_request_id,
)


def _request(path="/test"):
    return Request(EnvironBuilder(path=path).get_environ())


def test_json_response():
    resp = json_response(200, {"hello": "world"})
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json; charset=utf-8"
    assert json.loads(resp.get_data(as_text=True)) == {"hello": "world"}


def test_json_response_custom_status():
    resp = json_response(201, {"count": 42})
    assert resp.status_code == 201
    assert json.loads(resp.get_data()) == {"count": 42}


def test_error_response():
    resp = error_response(400, "invalid input")
    assert resp.status_code == 400
    assert resp.headers["Content-Type"] == "application/json; charset=utf-8"
    body = json.loads(resp.get_data())
    assert body["error"]["message"] == "invalid input"
    assert body["error"]["type"] == "invalid_request_error"
    assert "code" not in body["error"]
    assert "request_id" not in body["error"]


def test_error_response_server_error():
    body = json.loads(error_response(500, "something broke").get_data())
    assert body["error"]["type"] == "server_error"


def test_bytes_response():
    resp = bytes_response(200, "application/octet-stream", b"raw binary content")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/octet-stream"
    assert resp.get_data() == b"raw binary content"


def test_bytes_response_text_plain():
    resp = bytes_response(200, "text/plain; charset=utf-8", b"Hello, world!")
    assert resp.headers["Content-Type"] == "text/plain; charset=utf-8"


def test_error_response_with_code():
    resp = error_response_with_code(429, "rate_limited", "slow down")
    assert resp.status_code == 429
    body = json.loads(resp.get_data())
    assert body["error"]["code"] == "rate_limited"
    assert body["error"]["message"] == "slow down"
    assert body["error"]["type"] == "rate_limit_error"


def test_error_response_for_request():
    request = _request()
    set_request_id(request, "test-req-123")
    resp = error_response_for_request(request, 400, "invalid_input", "bad request")
    body = json.loads(resp.get_data())
    assert body["error"]["request_id"] == "test-req-123"
    assert body["error"]["code"] == "invalid_input"
    assert body["error"]["message"] == "bad request"


def test_request_id_defaults_to_empty():
    assert get_request_id(_request()) == ""


def test_request_id_round_trip():
    request = _request()
    set_request_id(request, "abc")
    assert get_request_id(request) == "abc"


@pytest.mark.parametrize(
    "status, expected",
    [
        (400, "invalid_request_error"),
        (401, "authentication_error"),
        (403, "permission_error"),
        (404, "not_found_error"),
        (413, "invalid_request_error"),
        (429, "rate_limit_error"),
        (500, "server_error"),
        (502, "server_error"),
        (503, "server_error"),
        (418, "api_error"),
        (200, "api_error"),
    ],
)
def test_error_type_for_status(status, expected):
    assert error_type_for_status(status) == expected