from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request, Response

from thunderstt.ratelimit import RateLimiter, client_ip, rate_limit


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def ok_handler(request: Request) -> Response:
    return Response(status=200)


def make_request(remote_addr: str) -> Request:
    return EnvironBuilder(path="/", environ_overrides={"REMOTE_ADDR": remote_addr}).get_request()


def test_allow_within_burst():
    limiter = RateLimiter(1, 3)
    results = [limiter.allow("10.0.0.1") for _ in range(3)]
    assert results == [True, True, True]


def test_exceeds_burst():
    limiter = RateLimiter(1, 2)
    assert limiter.allow("10.0.0.1") is True
    assert limiter.allow("10.0.0.1") is True
    assert limiter.allow("10.0.0.1") is False


def test_tokens_refill_over_time():
    clock = FakeClock()
    limiter = RateLimiter(1, 1, clock=clock)
    assert limiter.allow("10.0.0.1") is True
    assert limiter.allow("10.0.0.1") is False
    clock.now += 1.0
    assert limiter.allow("10.0.0.1") is True
    assert limiter.allow("10.0.0.1") is False


def test_refill_is_capped_at_burst():
    clock = FakeClock()
    limiter = RateLimiter(10, 2, clock=clock)
    limiter.allow("a")
    clock.now += 100.0
    assert [limiter.allow("a") for _ in range(3)] == [True, True, False]


def test_purge_removes_stale_visitors():
    clock = FakeClock()
    limiter = RateLimiter(1, 1, cleanup=60, clock=clock)
    limiter.allow("10.0.0.1")
    limiter.allow("10.0.0.2")
    assert len(limiter) == 2
    clock.now += 30
    limiter.allow("10.0.0.2")
    clock.now += 40
    limiter.purge()
    assert len(limiter) == 1


def test_middleware_limits_second_request():
    handler = rate_limit(1, 1)(ok_handler)

    first = handler(make_request("192.168.1.1:12345"))
    assert first.status_code == 200

    second = handler(make_request("192.168.1.1:12345"))
    assert second.status_code == 429
    assert second.headers["Retry-After"] == "1"
    assert "rate limit exceeded" in second.get_data(as_text=True)


def test_middleware_separate_buckets_per_ip():
    handler = rate_limit(1, 1)(ok_handler)

    assert handler(make_request("10.0.0.1:1111")).status_code == 200
    assert handler(make_request("10.0.0.2:2222")).status_code == 200
    assert handler(make_request("10.0.0.1:3333")).status_code == 429


def test_client_ip_strips_port():
    assert client_ip("192.168.1.1:12345") == "192.168.1.1"
    assert client_ip("[::1]:80") == "[::1]"


def test_client_ip_without_port():
    assert client_ip("10.0.0.1") == "10.0.0.1"
    assert client_ip("") == ""