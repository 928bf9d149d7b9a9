"""JSON and raw-byte responses in the OpenAI error format, plus request-ID helpers."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from werkzeug.wrappers import Request, Response

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

_REQUEST_ID_KEY = "thunderstt.request_id"

_ERROR_TYPES = {
    400: "invalid_request_error",
    401: "authentication_error",
    403: "permission_error",
    404: "not_found_error",
    413: "invalid_request_error",
    429: "rate_limit_error",
}


def get_request_id(request: Request) -> str:
    """Return the request ID stored on the request, or an empty string."""
    value = request.environ.get(_REQUEST_ID_KEY)
    return value if isinstance(value, str) else ""


def set_request_id(request: Request, request_id: str) -> None:
    """Store a request ID on the request for later correlation."""
    request.environ[_REQUEST_ID_KEY] = request_id


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _encode(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), default=_default) + "\n"


def json_response(status: int, data: Any) -> Response:
    """Serialise data as JSON with the given status code."""
    return Response(_encode(data), status=status, content_type=JSON_CONTENT_TYPE)


def _error(status: int, message: str, code: str = "", request_id: str = "") -> Response:
    detail: dict[str, str] = {"message": message, "type": error_type_for_status(status)}
    if code:
        detail["code"] = code
    if request_id:
        detail["request_id"] = request_id
    return json_response(status, {"error": detail})


def error_response(status: int, message: str) -> Response:
    """Build an error response in the OpenAI error format."""
    return _error(status, message)


def error_response_with_code(status: int, code: str, message: str) -> Response:
    """Build an error response carrying an explicit error code."""
    return _error(status, message, code=code)


def error_response_for_request(request: Request, status: int, code: str, message: str) -> Response:
    """Build an error response that includes the request's ID."""
    return _error(status, message, code=code, request_id=get_request_id(request))


def bytes_response(status: int, content_type: str, data: bytes | str) -> Response:
    """Return raw data with the given content type and status."""
    return Response(data, status=status, content_type=content_type)


def error_type_for_status(status: int) -> str:
    """Map an HTTP status code to an OpenAI-style error type."""
    if status in _ERROR_TYPES:
        return _ERROR_TYPES[status]
    if status >= 500:
        return "server_error"
    return "api_error"