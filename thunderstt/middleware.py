"""HTTP middleware: request IDs, logging, panic recovery, CORS, body limits, timeouts."""

from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable

from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.wrappers import Request, Response

from thunderstt.response import (
    error_response,
    error_response_for_request,
    get_request_id,
    set_request_id,
)

Handler = Callable[[Request], Response]
Middleware = Callable[[Handler], Handler]

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
DEADLINE_KEY = "thunderstt.deadline"

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Accept, Authorization, Content-Type, X-Request-ID",
    "Access-Control-Max-Age": "86400",
}


def new_uuid() -> str:
    """Return a random version 4 UUID string."""
    return str(uuid.uuid4())


def request_id(handler: Handler) -> Handler:
    """Ensure every request carries an ID, reusing an incoming X-Request-ID."""

    def wrapped(request: Request) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "") or new_uuid()
        set_request_id(request, rid)
        response = handler(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

    return wrapped


def logging_middleware(handler: Handler) -> Handler:
    """Log every request with its method, path, status, size and duration."""

    def wrapped(request: Request) -> Response:
        start = time.monotonic()
        response = handler(request)
        duration = time.monotonic() - start

        status = response.status_code
        fields = {
            "request_id": get_request_id(request),
            "method": request.method,
            "path": request.path,
            "status": status,
            "bytes": response.calculate_content_length() or 0,
            "duration": duration,
            "remote_addr": request.remote_addr or "",
            "user_agent": request.headers.get("User-Agent", ""),
            "content_length": request.content_length or 0,
        }
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, "request completed", extra=fields)
        return response

    return wrapped


def recovery(handler: Handler) -> Handler:
    """Turn any unhandled exception into a logged 500 response."""

    def wrapped(request: Request) -> Response:
        try:
            return handler(request)
        except Exception:
            logger.exception(
                "panic recovered", extra={"request_id": get_request_id(request)}
            )
            return error_response(500, "internal server error")

    return wrapped


def cors(handler: Handler) -> Handler:
    """Add permissive CORS headers and answer preflight requests with 204."""

    def wrapped(request: Request) -> Response:
        if request.method == "OPTIONS":
            response = Response(status=204)
        else:
            response = handler(request)
        response.headers.update(_CORS_HEADERS)
        return response

    return wrapped


class _LimitedReader:
    """Input stream wrapper that refuses to yield more than max_bytes."""

    def __init__(self, stream, max_bytes: int) -> None:
        self._stream = stream
        self._remaining = max_bytes

    def _account(self, data: bytes) -> bytes:
        self._remaining -= len(data)
        if self._remaining < 0:
            raise RequestEntityTooLarge("http: request body too large")
        return data

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            return self._account(self._stream.read(self._remaining + 1))
        return self._account(self._stream.read(min(size, self._remaining + 1)))

    def readline(self, size: int = -1) -> bytes:
        limit = self._remaining + 1 if size is None or size < 0 else min(size, self._remaining + 1)
        return self._account(self._stream.readline(limit))


def max_body_size(max_bytes: int) -> Middleware:
    """Return middleware that rejects request bodies larger than max_bytes with 413.

    It must run before anything reads the request body.
    """

    def middleware(handler: Handler) -> Handler:
        def wrapped(request: Request) -> Response:
            request.environ["wsgi.input"] = _LimitedReader(request.environ["wsgi.input"], max_bytes)
            try:
                return handler(request)
            except RequestEntityTooLarge:
                return error_response(413, "request body too large")

        return wrapped

    return middleware


def request_timeout(seconds: float) -> Middleware:
    """Return middleware that answers 503 if the handler takes longer than seconds.

    The deadline is also stored in the WSGI environ under DEADLINE_KEY.
    """

    def middleware(handler: Handler) -> Handler:
        def wrapped(request: Request) -> Response:
            request.environ[DEADLINE_KEY] = time.monotonic() + seconds
            pool = ThreadPoolExecutor(max_workers=1)
            future = pool.submit(handler, request)
            pool.shutdown(wait=False)
            try:
                return future.result(timeout=seconds)
            except FutureTimeout:
                logger.warning(
                    "request timed out", extra={"request_id": get_request_id(request)}
                )
                return error_response_for_request(
                    request, 503, "timeout", "request cancelled or timed out"
                )

        return wrapped

    return middleware


def chain(handler: Handler, *args: Middleware) -> Handler:
    """Wrap handler in middlewares; the first one given is the outermost."""
    for middleware in reversed(args):
        handler = middleware(handler)
    return handler