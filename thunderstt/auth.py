"""Bearer-token authentication middleware."""

from __future__ import annotations

from typing import Callable

from werkzeug.wrappers import Request, Response

from thunderstt.response import error_response_with_code

Handler = Callable[[Request], Response]

_EXEMPT_PATHS = frozenset({"/health", "/ready", "/metrics"})


def bearer_auth(api_key: str) -> Callable[[Handler], Handler]:
    """Return middleware requiring "Bearer <api_key>" in the Authorization header.

    An empty api_key disables authentication. Health, readiness and metrics
    endpoints are always exempt.
    """

    def middleware(handler: Handler) -> Handler:
        def wrapped(request: Request) -> Response:
            if not api_key or request.path in _EXEMPT_PATHS:
                return handler(request)

            auth = request.headers.get("Authorization", "")
            if not auth:
                return error_response_with_code(
                    401, "missing_api_key", "missing Authorization header"
                )

            for prefix in ("Bearer ", "bearer "):
                if auth.startswith(prefix):
                    token = auth[len(prefix):]
                    break
            else:
                return error_response_with_code(
                    401, "invalid_auth_format", "Authorization header must use Bearer scheme"
                )

            if token.strip() != api_key:
                return error_response_with_code(401, "invalid_api_key", "invalid API key")

            return handler(request)

        return wrapped

    return middleware