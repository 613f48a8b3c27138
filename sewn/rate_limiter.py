"""
Redis-backed fixed-window rate limiting.
Falls back to a per-process counter when Redis cannot be reached.
"""

import logging
import os
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import RATE_LIMIT_ENABLED

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# {key: (count, reset_time)} used only while Redis is unavailable
memory_counters: dict[str, tuple[int, int]] = {}
memory_lock = Lock()


def get_redis_client() -> redis.Redis:
    """Get or create the shared Redis client (REDIS_URL, or REDIS_HOST/PORT/... settings)"""
    global redis_client

    if redis_client is None:
        redis_url = os.getenv("REDIS_URL")
        if redis_url:
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30,
            )
        else:
            client = redis.Redis(
                host=os.getenv("REDIS_HOST", "localhost"),
                port=int(os.getenv("REDIS_PORT", "6379")),
                password=os.getenv("REDIS_PASSWORD"),
                db=int(os.getenv("REDIS_DB", "0")),
                ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        client.ping()
        logger.info("Redis connected for rate limiting")
        redis_client = client

    return redis_client


def _check_memory(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    now = int(time.time())
    with memory_lock:
        count, reset_time = memory_counters.get(key, (0, now + window_seconds))
        if now >= reset_time:
            count, reset_time = 0, now + window_seconds
        count += 1
        memory_counters[key] = (count, reset_time)
    return count <= limit, count, reset_time - now


def check_rate_limit(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    """
    Count one request against `key`.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    try:
        client = get_redis_client()
        pipe = client.pipeline()
        pipe.incr(key)
        pipe.expire(key, window_seconds, nx=True)
        pipe.ttl(key)
        count, _, ttl = pipe.execute()
        return count <= limit, count, max(0, ttl)
    except redis.RedisError as e:
        logger.warning(f"⚠️ Redis unavailable for rate limiting, using in-process counter: {e}")
        return _check_memory(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency.

    Example usage:
        @router.post("/confirm", dependencies=[Depends(create_rate_limiter(10, 60, "payment_confirm"))])
    """

    async def rate_limiter(request: Request):
        if not RATE_LIMIT_ENABLED:
            return

        key = f"{key_prefix}:{client_ip(request)}"
        is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds)

        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests")
            raise HTTPException(
                status_code=429,
                detail={
                    "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                    "retry_after": ttl,
                },
                headers={"Retry-After": str(ttl)},
            )

    return rate_limiter
