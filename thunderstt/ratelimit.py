"""Per-client token-bucket rate limiting."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from werkzeug.wrappers import Request, Response

from thunderstt.response import error_response

Handler = Callable[[Request], Response]

DEFAULT_CLEANUP_SECONDS = 5 * 60.0


@dataclass
class _Visitor:
    tokens: float
    last_seen: float


class RateLimiter:
    """Token bucket rate limiter keyed by client IP.

    Each client starts with a full bucket of ``burst`` tokens that refills at
    ``rate`` tokens per second. Clients idle for longer than ``cleanup``
    seconds are forgotten.
    """

    def __init__(
        self,
        rate: float,
        burst: int,
        cleanup: float = DEFAULT_CLEANUP_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.rate = rate
        self.burst = burst
        self.cleanup = cleanup
        self._clock = clock
        self._lock = threading.Lock()
        self._visitors: dict[str, _Visitor] = {}
        self._last_purge = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._visitors)

    def allow(self, ip: str) -> bool:
        """Take one token from the client's bucket; False if it is empty."""
        with self._lock:
            now = self._clock()
            if now - self._last_purge >= self.cleanup:
                self._purge_locked(now)

            visitor = self._visitors.get(ip)
            if visitor is None:
                self._visitors[ip] = _Visitor(tokens=float(self.burst) - 1, last_seen=now)
                return True

            elapsed = now - visitor.last_seen
            visitor.tokens = min(visitor.tokens + elapsed * self.rate, float(self.burst))
            visitor.last_seen = now

            if visitor.tokens < 1:
                return False
            visitor.tokens -= 1
            return True

    def purge(self) -> None:
        """Forget clients that have not been seen within the cleanup interval."""
        with self._lock:
            self._purge_locked(self._clock())

    def _purge_locked(self, now: float) -> None:
        stale = [ip for ip, v in self._visitors.items() if now - v.last_seen > self.cleanup]
        for ip in stale:
            del self._visitors[ip]
        self._last_purge = now


def client_ip(remote_addr: str) -> str:
    """Strip a trailing ":port" from a remote address."""
    if len(remote_addr) > 1:
        idx = remote_addr.rfind(":")
        if idx >= 0:
            return remote_addr[:idx]
    return remote_addr


def rate_limit(rate: float, burst: int) -> Callable[[Handler], Handler]:
    """Return middleware that answers 429 once a client exceeds its rate."""
    limiter = RateLimiter(rate, burst)

    def middleware(handler: Handler) -> Handler:
        def wrapped(request: Request) -> Response:
            ip = client_ip(request.remote_addr or "")
            if not limiter.allow(ip):
                response = error_response(429, "rate limit exceeded")
                response.headers["Retry-After"] = "1"
                return response
            return handler(request)

        return wrapped

    return middleware