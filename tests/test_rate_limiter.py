import pytest
import redis
from fastapi import HTTPException
from starlette.requests import Request

from sewn import rate_limiter


def _request(ip="1.2.3.4", forwarded=None):
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "headers": headers, "client": (ip, 1234)})


@pytest.fixture
def redis_down(monkeypatch):
    def unavailable():
        raise redis.ConnectionError("no redis")

    monkeypatch.setattr(rate_limiter, "get_redis_client", unavailable)
    monkeypatch.setattr(rate_limiter, "memory_counters", {})


def test_memory_fallback_counts_within_window(redis_down):
    results = [rate_limiter.check_rate_limit("k", 2, 60)[0] for _ in range(3)]
    assert results == [True, True, False]


def test_client_ip_prefers_forwarded_header():
    assert rate_limiter.client_ip(_request(forwarded="9.9.9.9, 10.0.0.1")) == "9.9.9.9"
    assert rate_limiter.client_ip(_request()) == "1.2.3.4"


@pytest.mark.asyncio
async def test_limiter_raises_429_with_retry_after(redis_down, monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)
    limiter = rate_limiter.create_rate_limiter(1, 60, "test")

    await limiter(_request())
    with pytest.raises(HTTPException) as exc_info:
        await limiter(_request())

    assert exc_info.value.status_code == 429
    assert int(exc_info.value.headers["Retry-After"]) > 0


@pytest.mark.asyncio
async def test_limiter_disabled_is_noop(redis_down, monkeypatch):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", False)
    limiter = rate_limiter.create_rate_limiter(1, 60, "test")

    for _ in range(5):
        await limiter(_request())
